"""Server-side request forgery exposure."""

from __future__ import annotations

from typing import Iterator

from flowaudit.scanning.checks.base import ScanContext
from flowaudit.scanning.models import Finding
from flowaudit.scanning.patterns import INTERNAL_URL_PATTERN
from flowaudit.scanning.types import Capability, FindingCategory, FindingSeverity
from flowaudit.scanning.walker import is_expression


def check_ssrf_risk(ctx: ScanContext) -> Iterator[Finding]:
    """Flag internal-network URLs on HTTP requests in workflows with a public webhook.

    Only webhook-class triggers activate the check; other trigger types do
    not expose the workflow to arbitrary callers.
    """
    if not ctx.nodes_with(Capability.WEBHOOK):
        return

    for node in ctx.nodes_with(Capability.HTTP_REQUEST):
        url = node.parameters.get("url")
        if not isinstance(url, str) or not url or is_expression(url):
            continue
        if not INTERNAL_URL_PATTERN.search(url):
            continue
        yield Finding(
            severity=FindingSeverity.WARNING,
            category=FindingCategory.INSECURE_CONFIG,
            title=f'SSRF risk: webhook with internal URL in "{node.name}"',
            description=(
                "This workflow has a public webhook and an HTTP Request to an "
                "internal network address. An attacker could exploit the webhook "
                "to reach internal services."
            ),
            node_name=node.name,
            parameter_path="url",
        )
