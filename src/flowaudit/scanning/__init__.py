"""flowaudit scanning package — rule engine, reachability and reporting."""

from flowaudit.scanning.catalog import DescriptionCatalog, NodeTypeDescription
from flowaudit.scanning.graph import Connection, Node, WorkflowGraph
from flowaudit.scanning.models import Finding, ScanReport
from flowaudit.scanning.service import ScanningService, scan_workflow

__all__ = [
    "Connection",
    "DescriptionCatalog",
    "Finding",
    "Node",
    "NodeTypeDescription",
    "ScanReport",
    "ScanningService",
    "WorkflowGraph",
    "scan_workflow",
]
