"""Text rendering of scan reports for LLM consumption.

The report is a block of tagged sections::

    <security_scan_results>
    <findings>...</findings>
    <workflow_overview>...</workflow_overview>
    <external_services>...</external_services>
    <data_flow_paths>...</data_flow_paths>
    </security_scan_results>
"""

from __future__ import annotations

from flowaudit.scanning.models import ScanReport

EMPTY_WORKFLOW_MESSAGE = "Empty workflow - no nodes to scan."
NO_FINDINGS = "No security issues found."
NO_SERVICES = "No external services detected."
NO_PATHS = "No data flow paths from triggers detected."


def _section(tag: str, lines: list[str]) -> list[str]:
    return [f"<{tag}>", *lines, f"</{tag}>"]


def _bullets(items: tuple[str, ...] | list[str], empty: str) -> list[str]:
    if not items:
        return [empty]
    return [f"- {item}" for item in items]


def format_security_report(report: ScanReport) -> str:
    """Render a report as tagged text sections."""
    finding_lines: list[str] = []
    for f in report.findings:
        matched = f" (matched: {f.matched_value})" if f.matched_value else ""
        finding_lines.append(f"- [{f.severity.label}] {f.title}{matched}")
        finding_lines.append(f"  {f.description}")

    parts = ["<security_scan_results>"]
    parts += _section("findings", finding_lines or [NO_FINDINGS])
    parts += _section("workflow_overview", [report.workflow_overview])
    parts += _section("external_services", _bullets(report.external_services, NO_SERVICES))
    parts += _section("data_flow_paths", _bullets(report.data_flow_paths, NO_PATHS))
    parts.append("</security_scan_results>")
    return "\n".join(parts)
