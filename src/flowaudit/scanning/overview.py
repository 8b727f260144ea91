"""Workflow overview and external-service inventory for scan reports.

Neither output includes parameter values other than sanitised literal URLs,
and a URL is left out altogether when it carries a secret or PII.
"""

from __future__ import annotations

from typing import Mapping

from flowaudit.scanning.graph import MAIN_CONNECTION, WorkflowGraph
from flowaudit.scanning.patterns import PII_SIGNATURES, SECRET_SIGNATURES, first_match
from flowaudit.scanning.redaction import sanitize_url
from flowaudit.scanning.types import Capability
from flowaudit.scanning.walker import is_expression


def _mermaid_label(text: str) -> str:
    return text.replace('"', "#quot;")


def render_overview(graph: WorkflowGraph) -> str:
    """Mermaid flowchart of node names, types and connections."""
    lines = ["flowchart TD"]
    ids: dict[str, str] = {}

    for node in graph.nodes:
        if node.name in ids:
            continue
        node_id = f"N{len(ids)}"
        ids[node.name] = node_id
        lines.append(f'    {node_id}["{_mermaid_label(node.name)} ({node.short_type})"]')

    for conn in graph.iter_connections():
        source_id = ids.get(conn.source)
        target_id = ids.get(conn.target)
        if source_id is None or target_id is None:
            continue
        if conn.connection_type == MAIN_CONNECTION:
            lines.append(f"    {source_id} --> {target_id}")
        else:
            lines.append(f"    {source_id} -->|{conn.connection_type}| {target_id}")

    return "\n".join(lines)


def _reportable_url(url: object) -> str | None:
    if not isinstance(url, str) or not url or is_expression(url):
        return None
    sanitized = sanitize_url(url)
    if first_match(SECRET_SIGNATURES, sanitized) or first_match(PII_SIGNATURES, sanitized):
        return None
    return sanitized


def identify_external_services(
    graph: WorkflowGraph,
    capabilities: Mapping[str, frozenset[Capability]],
) -> list[str]:
    """One entry per external-service node, deduplicated, in graph order."""
    services: list[str] = []
    seen: set[str] = set()

    for node in graph.nodes:
        if Capability.EXTERNAL_SERVICE not in capabilities.get(node.name, frozenset()):
            continue
        url = _reportable_url(node.parameters.get("url"))
        if url:
            entry = f"{url} ({node.name}, {node.short_type})"
        else:
            entry = f"{node.short_type} ({node.name})"
        if entry not in seen:
            seen.add(entry)
            services.append(entry)

    return services
