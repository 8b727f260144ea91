"""flowaudit CLI — scan an exported workflow file and print the report."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from flowaudit.config import load_settings
from flowaudit.errors.exceptions import FlowAuditError, GraphLoadError
from flowaudit.logging_config import configure_logging
from flowaudit.scanning.catalog import DescriptionCatalog
from flowaudit.scanning.graph import WorkflowGraph
from flowaudit.scanning.report import EMPTY_WORKFLOW_MESSAGE, format_security_report
from flowaudit.scanning.service import ScanningService
from flowaudit.scanning.types import FindingSeverity

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_ERROR = 2


def _read_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise GraphLoadError(f"Cannot read {path}: {e.strerror}") from e
    except json.JSONDecodeError as e:
        raise GraphLoadError(f"Invalid JSON in {path}: {e}") from e


def _load_catalog(path: str | None) -> DescriptionCatalog:
    if not path:
        return DescriptionCatalog()
    data = _read_json(Path(path))
    if isinstance(data, dict):
        # Accept {"nodeTypes": [...]} as well as a bare list
        data = data.get("nodeTypes", [])
    if not isinstance(data, list):
        raise GraphLoadError(f"Node-type catalog {path} must be a list of descriptions")
    return DescriptionCatalog(d for d in data if isinstance(d, dict) and "name" in d)


def cmd_scan(args: argparse.Namespace) -> int:
    """Scan one workflow file."""
    settings = load_settings(args.config)
    overrides = {}
    if args.parallel:
        overrides["parallel_checks"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level
    if overrides:
        settings = settings.model_copy(update=overrides)

    configure_logging(settings.log_level, json_output=settings.json_logs)

    workflow_path = Path(args.workflow)
    data = _read_json(workflow_path)
    if isinstance(data, dict) and not data.get("name"):
        data = {**data, "name": workflow_path.stem}
    graph = WorkflowGraph.from_workflow(data)
    catalog = _load_catalog(args.catalog)

    report = ScanningService(settings=settings).scan(graph, catalog)

    if args.format == "json":
        print(json.dumps(report.to_dict(), indent=2))
    elif not graph.nodes:
        print(EMPTY_WORKFLOW_MESSAGE)
    else:
        print(format_security_report(report))

    if args.fail_on:
        threshold = FindingSeverity(args.fail_on).rank
        if any(f.severity_rank <= threshold for f in report.findings):
            return EXIT_FINDINGS
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowaudit",
        description="Static security analysis for workflow automation graphs",
    )
    sub = parser.add_subparsers(dest="command")

    scan = sub.add_parser("scan", help="Scan an exported workflow JSON file")
    scan.add_argument("workflow", help="Path to the workflow JSON export")
    scan.add_argument("--catalog", help="Path to node-type descriptions JSON")
    scan.add_argument("--config", help="Path to a TOML file with a [flowaudit] table")
    scan.add_argument("--format", choices=["text", "json"], default="text")
    scan.add_argument("--parallel", action="store_true", help="Run checks on a thread pool")
    scan.add_argument(
        "--fail-on",
        choices=[s.value for s in FindingSeverity],
        help="Exit with status 1 when a finding at or above this severity exists",
    )
    scan.add_argument("--log-level", choices=["debug", "info", "warning", "error"])
    scan.set_defaults(func=cmd_scan)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return EXIT_ERROR

    try:
        return args.func(args)
    except (FlowAuditError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
