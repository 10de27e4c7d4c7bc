"""
Command line entry point.

Run with: vitals-risk predict request.json --format table
"""

import argparse
import json
import sys
from typing import Any, TextIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vitals_risk.config import get_config, print_config_summary
from vitals_risk.domain.errors import PipelineComputationError
from vitals_risk.domain.models import PredictionResponse
from vitals_risk.observability import configure_logging
from vitals_risk.services.boundary import error_body, evaluate_payload, service_status

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_REJECTED = 2


def _read_payload(source: str, stdin: TextIO) -> Any:
    if source == "-":
        return json.load(stdin)
    with open(source, encoding="utf-8") as fh:
        return json.load(fh)


def render_response(response: PredictionResponse, console: Console) -> None:
    """Pretty-print a response as rich tables."""
    meta = response.meta
    console.print(
        Panel.fit(
            f"Window: {meta.window_start or '?'} to {meta.window_end or '?'}\n"
            f"Days: {meta.days}   Missing: {meta.missing_frac:.0%}",
            title="Risk Report",
        )
    )

    risk_table = Table(title="Risk")
    risk_table.add_column("Condition", style="cyan")
    risk_table.add_column("Probability", justify="right")
    risk_table.add_column("CI90", justify="right")
    for name, risk in (("T2D", response.risk.t2d), ("HTN", response.risk.htn)):
        lo, hi = risk.ci90
        risk_table.add_row(name, f"{risk.prob:.2f}", f"{lo:.2f} - {hi:.2f}")
    console.print(risk_table)

    anomaly_style = "red" if response.anomaly.flag else "green"
    console.print(
        f"Anomaly score: [{anomaly_style}]{response.anomaly.score:.2f}[/{anomaly_style}]"
        f" (flag: {response.anomaly.flag})"
    )

    contrib_table = Table(title="Top Contributors")
    contrib_table.add_column("Model", style="cyan")
    contrib_table.add_column("Feature")
    contrib_table.add_column("Impact", justify="right")
    for model, contributors in (
        ("T2D", response.top_contributors.t2d),
        ("HTN", response.top_contributors.htn),
    ):
        for c in contributors:
            contrib_table.add_row(model, c.feature, f"{c.impact:.3f}")
    console.print(contrib_table)

    decision = response.decision
    console.print(
        Panel.fit(
            f"Notify client: {decision.notify_client}\n"
            f"Notify doctor: {decision.notify_doctor}\n"
            f"Reason: {decision.reason}",
            title="Decision",
        )
    )


def _predict(args: argparse.Namespace, console: Console, stdin: TextIO) -> int:
    try:
        payload = _read_payload(args.source, stdin)
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Could not read request: {e}[/red]")
        return EXIT_FAILED

    result = evaluate_payload(payload, get_config())
    if result.is_err():
        error = result.unwrap_err()
        console.print_json(data=error_body(error))
        return EXIT_FAILED if isinstance(error, PipelineComputationError) else EXIT_REJECTED

    response = result.unwrap()
    if args.format == "table":
        render_response(response, console)
    else:
        console.print_json(data=response.model_dump(mode="json"))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vitals-risk", description="Score daily health telemetry windows"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    predict = sub.add_parser("predict", help="Score a request JSON document")
    predict.add_argument("source", nargs="?", default="-", help="Request file, or - for stdin")
    predict.add_argument("--format", choices=("json", "table"), default="json")

    sub.add_parser("status", help="Print the service status body")
    sub.add_parser("config", help="Print the active configuration")
    return parser


def main(argv: list[str] | None = None, stdin: TextIO | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    configure_logging(config.logging)
    console = Console()

    if args.command == "status":
        console.print_json(data=service_status())
        return EXIT_OK
    if args.command == "config":
        print_config_summary(config)
        return EXIT_OK
    return _predict(args, console, stdin or sys.stdin)


if __name__ == "__main__":
    sys.exit(main())
