"""Graph model for workflow automation graphs.

A workflow is a set of named nodes plus a connection map keyed by source
node name, then connection type, then output index. Each output slot holds
zero or more target edges. The model is read-only once loaded and never
validates that edge targets exist: consumers skip dangling references.
"""

from __future__ import annotations

import json
from typing import Any, Iterator

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    field_validator,
)

from flowaudit.errors.exceptions import GraphLoadError

MAIN_CONNECTION = "main"
AI_TOOL_CONNECTION = "ai_tool"


class Node(BaseModel):
    """A processing node. Identity is by ``name``."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    type: str
    parameters: dict[str, Any] = Field(default_factory=dict)

    @field_validator("parameters", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def short_type(self) -> str:
        """Type name without its package namespace."""
        return self.type.rsplit(".", 1)[-1]


class Connection(BaseModel):
    """A directed, typed edge between two nodes."""

    model_config = ConfigDict(frozen=True)

    source: str
    connection_type: str
    output_index: int
    target: str
    input_index: int = 0


class _SlotTarget(BaseModel):
    """One entry of an output slot in the exported connection map."""

    model_config = ConfigDict(extra="ignore")

    node: str
    type: str | None = None
    index: int = 0


# connections[source][connection_type][output_index] -> targets
ConnectionMap = dict[str, dict[str, list[list[_SlotTarget] | None]]]


class WorkflowGraph(BaseModel):
    """Read-only workflow graph."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = "workflow"
    nodes: list[Node] = Field(default_factory=list)
    connections: ConnectionMap = Field(default_factory=dict)

    _node_index: dict[str, Node] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        for node in self.nodes:
            # First definition wins if an export repeats a name
            self._node_index.setdefault(node.name, node)

    @field_validator("connections", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def from_workflow(cls, data: dict[str, Any]) -> WorkflowGraph:
        """Build a graph from an exported workflow document."""
        if not isinstance(data, dict):
            raise GraphLoadError("Workflow document must be a JSON object")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise GraphLoadError(
                "Workflow document is not a valid graph",
                details=e.errors(include_url=False),
            ) from e

    @classmethod
    def from_json(cls, text: str) -> WorkflowGraph:
        """Parse exported workflow JSON text."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise GraphLoadError(f"Invalid workflow JSON: {e}") from e
        return cls.from_workflow(data)

    def all_nodes(self) -> list[Node]:
        return list(self.nodes)

    def node_by_name(self, name: str) -> Node | None:
        """Get node by name, or None for unknown names."""
        return self._node_index.get(name)

    def connections_from(self, name: str) -> list[Connection]:
        """All outgoing edges of a node, in type, output-index, slot order."""
        return list(self.iter_connections_from(name))

    def iter_connections_from(
        self,
        name: str,
        connection_type: str | None = None,
    ) -> Iterator[Connection]:
        by_type = self.connections.get(name)
        if not by_type:
            return
        for conn_type, outputs in by_type.items():
            if connection_type is not None and conn_type != connection_type:
                continue
            for output_index, slot in enumerate(outputs or []):
                if not slot:
                    continue
                for target in slot:
                    yield Connection(
                        source=name,
                        connection_type=conn_type,
                        output_index=output_index,
                        target=target.node,
                        input_index=target.index,
                    )

    def targets_of(self, name: str, connection_type: str | None = None) -> list[Node]:
        """Existing target nodes of a node's outgoing edges.

        Dangling targets are dropped. A target reached twice is listed twice,
        matching the edge list.
        """
        targets = []
        for conn in self.iter_connections_from(name, connection_type):
            node = self.node_by_name(conn.target)
            if node is not None:
                targets.append(node)
        return targets

    def iter_connections(self) -> Iterator[Connection]:
        """Every edge in the graph, grouped by source in map order."""
        for source in self.connections:
            yield from self.iter_connections_from(source)
