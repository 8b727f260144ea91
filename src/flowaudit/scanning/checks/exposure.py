"""Reachability-based checks: trigger data reaching external services."""

from __future__ import annotations

from typing import Iterator

from flowaudit.scanning.checks.base import ScanContext
from flowaudit.scanning.models import Finding
from flowaudit.scanning.reachability import (
    breadth_first,
    external_reached_from,
    trigger_names,
)
from flowaudit.scanning.types import Capability, FindingCategory, FindingSeverity


def check_data_exposure(ctx: ScanContext) -> Iterator[Finding]:
    """One finding per external service reachable from any trigger.

    Services are reported in breadth-first discovery order from all triggers
    together; each finding names the triggers whose data reaches it.
    """
    triggers = trigger_names(ctx.graph, ctx.capabilities)
    if not triggers:
        return

    reached_by: dict[str, list[str]] = {}
    for trigger in triggers:
        for name in breadth_first(ctx.graph, [trigger]).reached():
            reached_by.setdefault(name, []).append(trigger)

    trigger_set = set(triggers)
    for name in breadth_first(ctx.graph, triggers).reached():
        if name in trigger_set:
            continue
        node = ctx.graph.node_by_name(name)
        if node is None or not ctx.has(node, Capability.EXTERNAL_SERVICE):
            continue
        origins = ", ".join(reached_by.get(name, triggers))
        yield Finding(
            severity=FindingSeverity.INFO,
            category=FindingCategory.DATA_EXPOSURE,
            title=f"External input flows to {node.short_type}",
            description=(
                f'Data from {origins} reaches "{node.name}". Ensure sensitive '
                "input data is filtered before sending externally."
            ),
            node_name=node.name,
        )


def check_fan_out(ctx: ScanContext) -> Iterator[Finding]:
    """Flag triggers whose data reaches many distinct external services."""
    threshold = ctx.settings.fan_out_threshold

    for trigger in trigger_names(ctx.graph, ctx.capabilities):
        _, external = external_reached_from(ctx.graph, ctx.capabilities, trigger)
        count = len(external)
        if count < threshold:
            continue
        yield Finding(
            severity=FindingSeverity.WARNING,
            category=FindingCategory.DATA_EXPOSURE,
            title=f'High fan-out: "{trigger}" reaches {count} external services',
            description=(
                f"A single trigger fans out to {count} external services. "
                "A compromised input could affect all of them."
            ),
            node_name=trigger,
        )
