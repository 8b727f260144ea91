"""Shared plumbing for security checks.

A check is a pure function of a :class:`ScanContext` that yields findings.
The context carries the read-only graph, the capability tags resolved once
per node from the catalog, and the scan settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Mapping

from flowaudit.config import ScanSettings
from flowaudit.scanning.graph import Node, WorkflowGraph
from flowaudit.scanning.models import Finding
from flowaudit.scanning.types import Capability
from flowaudit.scanning.walker import ParameterString, iter_parameter_strings


@dataclass(frozen=True)
class ScanContext:
    graph: WorkflowGraph
    capabilities: Mapping[str, frozenset[Capability]]
    settings: ScanSettings

    def has(self, node: Node, capability: Capability) -> bool:
        return capability in self.capabilities.get(node.name, frozenset())

    def nodes_with(self, capability: Capability) -> list[Node]:
        """Nodes carrying ``capability``, in graph order."""
        return [node for node in self.graph.nodes if self.has(node, capability)]

    def strings(self, node: Node) -> Iterator[ParameterString]:
        """Every string leaf of a node's parameters."""
        return iter_parameter_strings(node.parameters, self.settings.max_parameter_depth)

    def literals(self, node: Node) -> Iterator[ParameterString]:
        return (item for item in self.strings(node) if not item.is_expression)

    def expressions(self, node: Node) -> Iterator[ParameterString]:
        return (item for item in self.strings(node) if item.is_expression)


CheckFunction = Callable[[ScanContext], Iterator[Finding]]


@dataclass(frozen=True)
class SecurityCheck:
    """A named check. The position in the registry fixes tie-break order."""

    name: str
    run: CheckFunction
