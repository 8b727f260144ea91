"""Pydantic models for scan output: Finding and ScanReport."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from flowaudit.scanning.redaction import redact_value
from flowaudit.scanning.types import FindingCategory, FindingSeverity


class Finding(BaseModel):
    """One security observation about a workflow node.

    ``matched_value`` is redacted by the model itself, so a finding can never
    hold a matched value in clear text.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    severity: FindingSeverity
    category: FindingCategory
    title: str
    description: str
    node_name: str
    parameter_path: str | None = None
    matched_value: str | None = None

    @field_validator("matched_value")
    @classmethod
    def _redact(cls, value: str | None) -> str | None:
        return redact_value(value) if value is not None else None

    @property
    def severity_rank(self) -> int:
        return self.severity.rank


def sort_findings(findings: list[Finding]) -> list[Finding]:
    """Stable sort by severity; ties keep their emission order."""
    return sorted(findings, key=lambda f: f.severity_rank)


class ScanReport(BaseModel):
    """Result of one scan. A transient value with no identity."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    findings: tuple[Finding, ...] = ()
    workflow_overview: str = ""
    external_services: tuple[str, ...] = ()
    data_flow_paths: tuple[str, ...] = ()

    @property
    def counts_by_severity(self) -> dict[str, int]:
        counts = {severity.value: 0 for severity in FindingSeverity}
        for finding in self.findings:
            counts[finding.severity.value] += 1
        return counts

    @property
    def has_critical(self) -> bool:
        return any(f.severity == FindingSeverity.CRITICAL for f in self.findings)

    @property
    def is_clean(self) -> bool:
        return len(self.findings) == 0

    def findings_by_category(self, category: FindingCategory) -> list[Finding]:
        """Get findings filtered by category."""
        return [f for f in self.findings if f.category == category]

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-safe dict."""
        return {
            "findings": [f.model_dump(mode="json", exclude_none=True) for f in self.findings],
            "summary": self.counts_by_severity,
            "workflow_overview": self.workflow_overview,
            "external_services": list(self.external_services),
            "data_flow_paths": list(self.data_flow_paths),
        }
