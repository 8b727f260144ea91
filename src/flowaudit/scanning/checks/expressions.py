"""Risky dynamic expressions: environment access and credential-like fields."""

from __future__ import annotations

from typing import Iterator

from flowaudit.scanning.checks.base import ScanContext
from flowaudit.scanning.models import Finding
from flowaudit.scanning.patterns import ENV_ACCESS_PATTERN, SENSITIVE_FIELD_EXPR_PATTERN
from flowaudit.scanning.types import FindingCategory, FindingSeverity


def check_expression_risks(ctx: ScanContext) -> Iterator[Finding]:
    for node in ctx.graph.nodes:
        for item in ctx.expressions(node):
            if ENV_ACCESS_PATTERN.search(item.value):
                yield Finding(
                    severity=FindingSeverity.INFO,
                    category=FindingCategory.EXPRESSION_RISK,
                    title=f'$env usage in "{node.name}"',
                    description=(
                        f"Environment variable accessed in expression at {item.path}. "
                        "Ensure this doesn't expose secrets to untrusted outputs."
                    ),
                    node_name=node.name,
                    parameter_path=item.path,
                )

            if SENSITIVE_FIELD_EXPR_PATTERN.search(item.value):
                yield Finding(
                    severity=FindingSeverity.INFO,
                    category=FindingCategory.EXPRESSION_RISK,
                    title=f'Sensitive field access in "{node.name}"',
                    description=(
                        f"Expression at {item.path} references a credential-like field name."
                    ),
                    node_name=node.name,
                    parameter_path=item.path,
                )
