"""Reachability analysis over workflow graphs.

Breadth-first traversal over every connection type (main data flow as well
as auxiliary AI wiring), starting from trigger nodes. Path reconstruction
from the predecessor map is kept separate from the traversal itself.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from flowaudit.scanning.graph import WorkflowGraph
from flowaudit.scanning.types import Capability

PATH_SEPARATOR = " → "
PATH_ELLIPSIS = "..."


@dataclass
class Traversal:
    """Result of a breadth-first traversal.

    ``order`` lists nodes in discovery order, sources first.
    ``predecessors`` maps each non-source node to the node it was first
    discovered from, which yields a shortest hop-count path.
    """

    sources: list[str]
    order: list[str] = field(default_factory=list)
    predecessors: dict[str, str] = field(default_factory=dict)

    @property
    def visited(self) -> set[str]:
        return set(self.order)

    def reached(self) -> list[str]:
        """Discovered nodes that are not sources, in discovery order."""
        sources = set(self.sources)
        return [name for name in self.order if name not in sources]


def successors(graph: WorkflowGraph, name: str) -> list[str]:
    """Names of existing nodes that ``name`` has an edge to, any connection type."""
    return [
        conn.target
        for conn in graph.iter_connections_from(name)
        if graph.node_by_name(conn.target) is not None
    ]


def breadth_first(graph: WorkflowGraph, sources: Iterable[str]) -> Traversal:
    """Traverse forward from ``sources``; dangling edges are skipped."""
    traversal = Traversal(sources=[])
    seen: set[str] = set()
    queue: deque[str] = deque()

    for source in sources:
        if source in seen or graph.node_by_name(source) is None:
            continue
        seen.add(source)
        traversal.sources.append(source)
        traversal.order.append(source)
        queue.append(source)

    while queue:
        current = queue.popleft()
        for target in successors(graph, current):
            if target in seen:
                continue
            seen.add(target)
            traversal.order.append(target)
            traversal.predecessors[target] = current
            queue.append(target)

    return traversal


def reconstruct_path(predecessors: Mapping[str, str], target: str) -> list[str]:
    """Walk the predecessor map back from ``target`` to its source."""
    path = [target]
    current = target
    while current in predecessors:
        current = predecessors[current]
        path.append(current)
    path.reverse()
    return path


def format_path(path: list[str], collapse_length: int = 5) -> str:
    """Render a path as ``A → B → C``.

    Paths with more than ``collapse_length`` nodes keep the first two and the
    last node: ``A → B → ... → Z``.
    """
    if len(path) > collapse_length:
        path = [path[0], path[1], PATH_ELLIPSIS, path[-1]]
    return PATH_SEPARATOR.join(path)


def trigger_names(
    graph: WorkflowGraph,
    capabilities: Mapping[str, frozenset[Capability]],
) -> list[str]:
    """Names of trigger nodes in graph order."""
    return [
        name for name in _unique_names(graph)
        if Capability.TRIGGER in capabilities.get(name, frozenset())
    ]


def external_reached_from(
    graph: WorkflowGraph,
    capabilities: Mapping[str, frozenset[Capability]],
    trigger: str,
) -> tuple[Traversal, list[str]]:
    """Traverse from one trigger and list the external services it reaches."""
    traversal = breadth_first(graph, [trigger])
    external = [
        name for name in traversal.reached()
        if Capability.EXTERNAL_SERVICE in capabilities.get(name, frozenset())
    ]
    return traversal, external


def trace_data_flows(
    graph: WorkflowGraph,
    capabilities: Mapping[str, frozenset[Capability]],
    max_paths: int = 10,
    collapse_length: int = 5,
) -> list[str]:
    """Shortest paths from each trigger to each external service it reaches.

    Triggers are taken in graph order and targets in discovery order; output
    stops as soon as ``max_paths`` paths have been produced.
    """
    paths: list[str] = []
    if max_paths <= 0:
        return paths

    for trigger in trigger_names(graph, capabilities):
        traversal, external = external_reached_from(graph, capabilities, trigger)
        for name in external:
            path = reconstruct_path(traversal.predecessors, name)
            paths.append(format_path(path, collapse_length))
            if len(paths) >= max_paths:
                return paths

    return paths


def _unique_names(graph: WorkflowGraph) -> list[str]:
    names: list[str] = []
    seen: set[str] = set()
    for node in graph.nodes:
        if node.name not in seen:
            seen.add(node.name)
            names.append(node.name)
    return names
