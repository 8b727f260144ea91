"""ScanningService — runs every security check against a workflow graph.

The service classifies nodes once, runs each registered check against the
same read-only context, merges and severity-sorts the findings, and builds
the report context (overview, external services, data-flow paths).

Usage::

    report = scan_workflow(WorkflowGraph.from_json(text), DescriptionCatalog(node_types))
    print(format_security_report(report))
"""

from __future__ import annotations

import contextvars
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Sequence

from flowaudit.config import ScanSettings, settings as default_settings
from flowaudit.errors.exceptions import CheckExecutionError
from flowaudit.logging_config import bind_scan_context, clear_scan_context
from flowaudit.scanning.catalog import DescriptionCatalog, NodeTypeCatalog, classify_nodes
from flowaudit.scanning.checks import DEFAULT_CHECKS, ScanContext, SecurityCheck
from flowaudit.scanning.graph import WorkflowGraph
from flowaudit.scanning.models import Finding, ScanReport, sort_findings
from flowaudit.scanning.overview import identify_external_services, render_overview
from flowaudit.scanning.reachability import trace_data_flows
from flowaudit.scanning.types import FindingCategory, FindingSeverity

logger = logging.getLogger(__name__)


class ScanningService:
    """Orchestrates workflow security checks."""

    def __init__(
        self,
        settings: ScanSettings | None = None,
        checks: Sequence[SecurityCheck] = DEFAULT_CHECKS,
    ) -> None:
        self._settings = settings or default_settings
        self._checks = tuple(checks)

    @property
    def settings(self) -> ScanSettings:
        return self._settings

    @property
    def check_names(self) -> list[str]:
        return [check.name for check in self._checks]

    # ----- public API -----

    def scan(
        self,
        graph: WorkflowGraph,
        catalog: NodeTypeCatalog | None = None,
    ) -> ScanReport:
        """Scan one workflow graph.

        Never raises for malformed-but-valid graphs: a check that fails is
        replaced by a single ``scan-incomplete`` info finding.
        """
        catalog = catalog if catalog is not None else DescriptionCatalog()

        if not graph.nodes:
            logger.info("Empty workflow, nothing to scan")
            return ScanReport()

        bind_scan_context(graph.name)
        started = time.perf_counter()
        try:
            capabilities = classify_nodes(graph, catalog)
            ctx = ScanContext(
                graph=graph,
                capabilities=capabilities,
                settings=self._settings,
            )

            per_check = self._run_checks(ctx)
            findings = sort_findings([f for batch in per_check for f in batch])

            report = ScanReport(
                findings=tuple(findings),
                workflow_overview=render_overview(graph),
                external_services=tuple(identify_external_services(graph, capabilities)),
                data_flow_paths=tuple(trace_data_flows(
                    graph,
                    capabilities,
                    max_paths=self._settings.max_data_flow_paths,
                    collapse_length=self._settings.path_collapse_length,
                )),
            )
        finally:
            clear_scan_context()

        counts = report.counts_by_severity
        logger.info(
            "Security scan of %d node(s) finished in %.1f ms: %d critical, %d warning, %d info",
            len(graph.nodes),
            (time.perf_counter() - started) * 1000,
            counts["critical"],
            counts["warning"],
            counts["info"],
        )
        return report

    # ----- internals -----

    def _run_checks(self, ctx: ScanContext) -> list[list[Finding]]:
        """Run every check; results stay in registry order either way."""
        if self._settings.parallel_checks and len(self._checks) > 1:
            # Workers start with an empty context; each call gets a copy of the bound scan context
            with ThreadPoolExecutor(max_workers=self._settings.max_workers) as pool:
                futures = [
                    pool.submit(contextvars.copy_context().run, self._run_check, check, ctx)
                    for check in self._checks
                ]
                return [future.result() for future in futures]
        return [self._run_check(check, ctx) for check in self._checks]

    def _run_check(self, check: SecurityCheck, ctx: ScanContext) -> list[Finding]:
        try:
            return list(check.run(ctx))
        except Exception as e:
            error = CheckExecutionError(check.name, e)
            logger.warning("%s", error.message, exc_info=logger.isEnabledFor(logging.DEBUG))
            return [_incomplete_finding(check.name, ctx.graph.name, error)]


def _incomplete_finding(check_name: str, workflow_name: str, error: CheckExecutionError) -> Finding:
    return Finding(
        severity=FindingSeverity.INFO,
        category=FindingCategory.SCAN_INCOMPLETE,
        title=f'Scan incomplete for check "{check_name}"',
        description=(
            f"The check stopped early ({error.details['error_type']}); "
            "its findings are missing from this report."
        ),
        node_name=workflow_name,
    )


def scan_workflow(
    graph: WorkflowGraph | dict[str, Any],
    catalog: NodeTypeCatalog | None = None,
    settings: ScanSettings | None = None,
) -> ScanReport:
    """Scan a workflow graph (or exported workflow document) with default checks."""
    if isinstance(graph, dict):
        graph = WorkflowGraph.from_workflow(graph)
    return ScanningService(settings=settings).scan(graph, catalog)
