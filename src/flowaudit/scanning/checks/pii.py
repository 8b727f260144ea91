"""Hardcoded PII detection."""

from __future__ import annotations

from typing import Iterator

from flowaudit.scanning.catalog import SET_TYPE
from flowaudit.scanning.checks.base import ScanContext
from flowaudit.scanning.models import Finding
from flowaudit.scanning.patterns import PII_SIGNATURES, first_match, is_pii_field_name
from flowaudit.scanning.types import FindingCategory, FindingSeverity

# Top-level containers of Set node field definitions across node versions
SET_FIELD_CONTAINERS = frozenset({"assignments", "fields", "values"})


def check_pii(ctx: ScanContext) -> Iterator[Finding]:
    for node in ctx.graph.nodes:
        for item in ctx.literals(node):
            signature = first_match(PII_SIGNATURES, item.value)
            if signature is None:
                continue
            yield Finding(
                severity=FindingSeverity.WARNING,
                category=FindingCategory.PII,
                title=f'{signature.label} in "{node.name}"',
                description=(
                    f"Hardcoded PII found in parameter: {item.path}. "
                    "Consider using expressions or credentials."
                ),
                node_name=node.name,
                parameter_path=item.path,
                matched_value=item.value,
            )


def check_pii_field_names(ctx: ScanContext) -> Iterator[Finding]:
    """Flag Set node fields whose names announce personal data.

    Only the field name is inspected, so a field filled from an expression
    is still reported.
    """
    for node in ctx.graph.nodes:
        if node.type != SET_TYPE:
            continue
        for item in ctx.literals(node):
            if item.field_name != "name" or item.top_level_key not in SET_FIELD_CONTAINERS:
                continue
            if not is_pii_field_name(item.value):
                continue
            yield Finding(
                severity=FindingSeverity.INFO,
                category=FindingCategory.PII,
                title=f'PII field "{item.value}" set in "{node.name}"',
                description=(
                    f"The field defined at {item.path} holds personal data. Make sure "
                    "downstream nodes and execution logs are allowed to store it."
                ),
                node_name=node.name,
                parameter_path=item.path,
            )
