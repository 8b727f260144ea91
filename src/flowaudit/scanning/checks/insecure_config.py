"""Insecure configuration checks: plain HTTP, disabled TLS checks, open webhooks."""

from __future__ import annotations

from typing import Any, Iterator

from flowaudit.scanning.checks.base import ScanContext
from flowaudit.scanning.graph import Node
from flowaudit.scanning.models import Finding
from flowaudit.scanning.catalog import WEBHOOK_AUTH_PARAMETER
from flowaudit.scanning.patterns import PLAIN_HTTP_PATTERN, host_of, is_local_host
from flowaudit.scanning.types import Capability, FindingCategory, FindingSeverity

# Parameters that turn off certificate verification, at top level or under "options"
TLS_SKIP_PARAMETERS = ("allowUnauthorizedCerts", "ignoreSSLIssues")


def _is_enabled(value: Any) -> bool:
    return value is True or value == "true"


def _tls_skip_paths(node: Node) -> list[str]:
    paths = []
    options = node.parameters.get("options")
    for name in TLS_SKIP_PARAMETERS:
        if _is_enabled(node.parameters.get(name)):
            paths.append(name)
        if isinstance(options, dict) and _is_enabled(options.get(name)):
            paths.append(f"options.{name}")
    return paths


def _is_unauthenticated(node: Node) -> bool:
    auth = node.parameters.get(WEBHOOK_AUTH_PARAMETER)
    return not auth or auth == "none"


def check_insecure_config(ctx: ScanContext) -> Iterator[Finding]:
    for node in ctx.graph.nodes:
        for item in ctx.literals(node):
            match = PLAIN_HTTP_PATTERN.search(item.value)
            if not match:
                continue
            host = host_of(match.group(1))
            if is_local_host(host):
                continue
            yield Finding(
                severity=FindingSeverity.WARNING,
                category=FindingCategory.INSECURE_CONFIG,
                title=f'HTTP URL (no TLS) in "{node.name}"',
                description=f'Use HTTPS instead of HTTP for "{host}". Found in: {item.path}',
                node_name=node.name,
                parameter_path=item.path,
            )

        for path in _tls_skip_paths(node):
            yield Finding(
                severity=FindingSeverity.WARNING,
                category=FindingCategory.INSECURE_CONFIG,
                title=f'SSL verification disabled in "{node.name}"',
                description=(
                    "Disabling SSL verification makes the connection "
                    "vulnerable to MITM attacks."
                ),
                node_name=node.name,
                parameter_path=path,
            )

        if ctx.has(node, Capability.WEBHOOK) and _is_unauthenticated(node):
            yield Finding(
                severity=FindingSeverity.WARNING,
                category=FindingCategory.INSECURE_CONFIG,
                title=f'Unauthenticated webhook "{node.name}"',
                description=(
                    "This webhook has no authentication. "
                    "Anyone with the URL can trigger it."
                ),
                node_name=node.name,
                parameter_path=WEBHOOK_AUTH_PARAMETER,
            )
