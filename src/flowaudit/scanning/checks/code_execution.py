"""Dangerous constructs and data logging in code-execution node bodies.

Bodies are matched as plain text; nothing is parsed, so invalid code simply
produces no matches.
"""

from __future__ import annotations

from typing import Iterator

from flowaudit.scanning.checks.base import ScanContext
from flowaudit.scanning.graph import Node
from flowaudit.scanning.models import Finding
from flowaudit.scanning.patterns import (
    CODE_BODY_PARAMETERS,
    CODE_INJECTION_SIGNATURES,
    DATA_LOGGING_SIGNATURES,
)
from flowaudit.scanning.types import Capability, FindingCategory, FindingSeverity


def _code_bodies(ctx: ScanContext) -> Iterator[tuple[Node, str, str]]:
    for node in ctx.nodes_with(Capability.CODE_EXECUTION):
        for param in CODE_BODY_PARAMETERS:
            code = node.parameters.get(param)
            if isinstance(code, str) and code:
                yield node, param, code


def check_code_injection(ctx: ScanContext) -> Iterator[Finding]:
    for node, param, code in _code_bodies(ctx):
        for signature in CODE_INJECTION_SIGNATURES:
            if not signature.search(code):
                continue
            yield Finding(
                severity=FindingSeverity.WARNING,
                category=FindingCategory.CODE_INJECTION,
                title=f'Dangerous "{signature.label}" usage in Code node "{node.name}"',
                description=(
                    f'The Code node uses "{signature.label}" which can execute '
                    "arbitrary code or access the server."
                ),
                node_name=node.name,
                parameter_path=param,
            )


def check_code_data_logging(ctx: ScanContext) -> Iterator[Finding]:
    for node, param, code in _code_bodies(ctx):
        for signature in DATA_LOGGING_SIGNATURES:
            if not signature.search(code):
                continue
            yield Finding(
                severity=FindingSeverity.INFO,
                category=FindingCategory.DATA_EXPOSURE,
                title=f'{signature.label} in Code node "{node.name}"',
                description=(
                    "Logged item data ends up in execution logs, which may be "
                    "readable by more people than the workflow data itself."
                ),
                node_name=node.name,
                parameter_path=param,
            )
