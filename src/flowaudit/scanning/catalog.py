"""Node-type catalog and capability classification.

The catalog is an external collaborator that knows which node types are
triggers, which call third-party services and which expose an inbound
webhook. Any lookup may come back unknown (``None``), in which case a
deterministic type-name heuristic decides. Classification runs once per
scan and produces a closed set of capability tags per node.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Protocol

from pydantic import BaseModel, ConfigDict, Field

from flowaudit.scanning.graph import Node, WorkflowGraph
from flowaudit.scanning.types import Capability

logger = logging.getLogger(__name__)

BASE_NODE_PREFIX = "n8n-nodes-base."
AI_NODE_PREFIX = "@n8n/n8n-nodes-langchain."

HTTP_REQUEST_TYPE = f"{BASE_NODE_PREFIX}httpRequest"
WEBHOOK_TYPE = f"{BASE_NODE_PREFIX}webhook"
SET_TYPE = f"{BASE_NODE_PREFIX}set"
AI_AGENT_TYPE = f"{AI_NODE_PREFIX}agent"
AI_HTTP_TOOL_TYPE = f"{AI_NODE_PREFIX}toolHttpRequest"
AI_CODE_TOOL_TYPE = f"{AI_NODE_PREFIX}toolCode"

# Parameter through which a webhook node selects its own caller authentication
WEBHOOK_AUTH_PARAMETER = "authentication"

DANGEROUS_TOOL_TYPES = frozenset({AI_HTTP_TOOL_TYPE, AI_CODE_TOOL_TYPE})

CODE_EXECUTION_TYPES = frozenset({
    f"{BASE_NODE_PREFIX}code",
    f"{BASE_NODE_PREFIX}codeNode",
    f"{BASE_NODE_PREFIX}function",
    f"{BASE_NODE_PREFIX}functionItem",
})


class NodeTypeCatalog(Protocol):
    """Lookups answered by the node-type metadata catalog.

    Each method returns ``None`` when the type is unknown to the catalog.
    """

    def is_trigger_type(self, type_name: str) -> bool | None: ...

    def is_external_service_type(self, type_name: str) -> bool | None: ...

    def is_webhook_type(self, type_name: str) -> bool | None: ...


class NodeTypeDescription(BaseModel):
    """The subset of a published node-type description the scanner reads."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    group: list[str] = Field(default_factory=list)
    credentials: list[dict[str, Any]] = Field(default_factory=list)
    webhooks: list[dict[str, Any]] = Field(default_factory=list)
    properties: list[dict[str, Any]] = Field(default_factory=list)

    def has_property(self, name: str) -> bool:
        return any(prop.get("name") == name for prop in self.properties)


class DescriptionCatalog:
    """Catalog backed by a list of node-type descriptions."""

    def __init__(self, descriptions: Iterable[NodeTypeDescription | dict] = ()):
        self._by_name: dict[str, NodeTypeDescription] = {}
        for desc in descriptions:
            if isinstance(desc, dict):
                desc = NodeTypeDescription.model_validate(desc)
            self._by_name[desc.name] = desc

    def __len__(self) -> int:
        return len(self._by_name)

    def get(self, type_name: str) -> NodeTypeDescription | None:
        return self._by_name.get(type_name)

    def is_trigger_type(self, type_name: str) -> bool | None:
        desc = self._by_name.get(type_name)
        if desc is None:
            return None
        return "trigger" in desc.group

    def is_external_service_type(self, type_name: str) -> bool | None:
        if type_name == HTTP_REQUEST_TYPE:
            return True
        desc = self._by_name.get(type_name)
        if desc is None:
            return None
        return len(desc.credentials) > 0

    def is_webhook_type(self, type_name: str) -> bool | None:
        """Whether the type is a public webhook guarded only by its own ``authentication``.

        App triggers also register webhooks, but the provider signs their
        calls and they expose no ``authentication`` parameter.
        """
        if type_name == WEBHOOK_TYPE:
            return True
        desc = self._by_name.get(type_name)
        if desc is None:
            return None
        return len(desc.webhooks) > 0 and desc.has_property(WEBHOOK_AUTH_PARAMETER)


# ---------------------------------------------------------------------------
# Type-name heuristics for types the catalog does not know
# ---------------------------------------------------------------------------


def _short_name(type_name: str) -> str:
    return type_name.rsplit(".", 1)[-1]


def heuristic_is_trigger(type_name: str) -> bool:
    short = _short_name(type_name).lower()
    return short.endswith("trigger") or short == "webhook"


def heuristic_is_external_service(type_name: str) -> bool:
    return type_name == HTTP_REQUEST_TYPE


def heuristic_is_webhook(type_name: str) -> bool:
    return _short_name(type_name).lower() == "webhook"


# ---------------------------------------------------------------------------
# Classification pass
# ---------------------------------------------------------------------------


def classify_node(node: Node, catalog: NodeTypeCatalog) -> frozenset[Capability]:
    """Resolve the capability tags of one node."""
    tags: set[Capability] = set()
    type_name = node.type

    is_trigger = catalog.is_trigger_type(type_name)
    if is_trigger is None:
        is_trigger = heuristic_is_trigger(type_name)
    if is_trigger:
        tags.add(Capability.TRIGGER)

    is_webhook = catalog.is_webhook_type(type_name)
    if is_webhook is None:
        is_webhook = heuristic_is_webhook(type_name)
    if is_webhook:
        tags.add(Capability.WEBHOOK)

    is_external = catalog.is_external_service_type(type_name)
    if is_external is None:
        is_external = heuristic_is_external_service(type_name)
    if is_external:
        tags.add(Capability.EXTERNAL_SERVICE)

    if type_name == HTTP_REQUEST_TYPE:
        tags.add(Capability.HTTP_REQUEST)
    if type_name.startswith(AI_NODE_PREFIX):
        tags.add(Capability.AI_NODE)
    if type_name == AI_AGENT_TYPE:
        tags.add(Capability.AI_AGENT)
    if type_name in DANGEROUS_TOOL_TYPES:
        tags.add(Capability.DANGEROUS_TOOL)
    if type_name in CODE_EXECUTION_TYPES:
        tags.add(Capability.CODE_EXECUTION)

    return frozenset(tags)


def classify_nodes(
    graph: WorkflowGraph,
    catalog: NodeTypeCatalog,
) -> dict[str, frozenset[Capability]]:
    """Resolve capability tags for every node in the graph, keyed by name."""
    capabilities: dict[str, frozenset[Capability]] = {}
    unknown_types: set[str] = set()

    for node in graph.nodes:
        if node.name in capabilities:
            continue
        if catalog.is_trigger_type(node.type) is None:
            unknown_types.add(node.type)
        capabilities[node.name] = classify_node(node, catalog)

    if unknown_types:
        logger.debug(
            "Classified %d node type(s) by name heuristic: %s",
            len(unknown_types),
            ", ".join(sorted(unknown_types)),
        )

    return capabilities
