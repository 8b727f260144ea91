"""flowaudit — static security analysis for workflow automation graphs."""

from flowaudit.scanning.models import Finding, ScanReport
from flowaudit.scanning.service import ScanningService, scan_workflow

__all__ = [
    "Finding",
    "ScanReport",
    "ScanningService",
    "scan_workflow",
]
