"""Scanning type definitions for flowaudit.

Enums for finding severity, finding categories and the node capability
tags that every check consumes.
"""

from enum import StrEnum


class FindingSeverity(StrEnum):
    """Finding severity classification, most severe first."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @property
    def label(self) -> str:
        return self.value.upper()


_SEVERITY_RANK = {
    FindingSeverity.CRITICAL: 0,
    FindingSeverity.WARNING: 1,
    FindingSeverity.INFO: 2,
}


class FindingCategory(StrEnum):
    """What kind of problem a finding describes."""

    HARDCODED_SECRET = "hardcoded-secret"
    PII = "pii"
    INSECURE_CONFIG = "insecure-config"
    EXPRESSION_RISK = "expression-risk"
    DATA_EXPOSURE = "data-exposure"
    CODE_INJECTION = "code-injection"

    # Emitted when a check fails and its results are missing from the report
    SCAN_INCOMPLETE = "scan-incomplete"


class Capability(StrEnum):
    """Capability tags resolved once per node before checks run."""

    TRIGGER = "trigger"
    WEBHOOK = "webhook"
    EXTERNAL_SERVICE = "external_service"
    HTTP_REQUEST = "http_request"
    AI_NODE = "ai_node"
    AI_AGENT = "ai_agent"
    CODE_EXECUTION = "code_execution"
    DANGEROUS_TOOL = "dangerous_tool"
