"""Hardcoded secret detection."""

from __future__ import annotations

from typing import Iterator

from flowaudit.scanning.checks.base import ScanContext
from flowaudit.scanning.models import Finding
from flowaudit.scanning.patterns import (
    SECRET_SIGNATURES,
    first_match,
    is_sensitive_field_name,
    looks_like_generic_token,
)
from flowaudit.scanning.types import FindingCategory, FindingSeverity


def check_hardcoded_secrets(ctx: ScanContext) -> Iterator[Finding]:
    """Flag literal values that match a provider signature or look like a token.

    A value matching a provider signature is reported once under the first
    matching signature; the generic-token heuristic only applies to values no
    signature matched.
    """
    for node in ctx.graph.nodes:
        for item in ctx.literals(node):
            signature = first_match(SECRET_SIGNATURES, item.value)
            if signature is not None:
                yield Finding(
                    severity=FindingSeverity.CRITICAL,
                    category=FindingCategory.HARDCODED_SECRET,
                    title=f'Hardcoded {signature.label} key in "{node.name}"',
                    description=(
                        "Move this key to the credential store. "
                        f"Found in parameter: {item.path}"
                    ),
                    node_name=node.name,
                    parameter_path=item.path,
                    matched_value=item.value,
                )
                continue

            if is_sensitive_field_name(item.field_name) and looks_like_generic_token(item.value):
                yield Finding(
                    severity=FindingSeverity.CRITICAL,
                    category=FindingCategory.HARDCODED_SECRET,
                    title=f'Possible hardcoded token in "{node.name}"',
                    description=(
                        f'The field "{item.path}" contains a hardcoded value '
                        "that looks like a secret."
                    ),
                    node_name=node.name,
                    parameter_path=item.path,
                    matched_value=item.value,
                )
