"""Command line entry point: import a workbook and compute its KPI snapshots."""

import argparse
import logging
import sys
from dataclasses import asdict
from pathlib import Path

import pandas as pd
import pandera as pa
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from workforce_kpi import ingest
from workforce_kpi.config import (
    ConfigDict,
    PipelineConfig,
    apply_overrides,
    get_env_config,
    load_pipeline_config,
)
from workforce_kpi.dashboard import (
    build_alerts,
    build_kpi_cards,
    build_trend_frame,
    render_snapshot,
    resolve_thresholds,
)
from workforce_kpi.ingest import ImportSummary, PeriodBatch
from workforce_kpi.metrics import MetricsSnapshot, compute_metrics_snapshot
from workforce_kpi.utils.io import write_json, write_output

type PeriodSnapshots = dict[str, MetricsSnapshot]

console = Console()
logger = logging.getLogger("workforce_kpi")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=verbose)],
        force=True,
    )


def load_config() -> ConfigDict:
    config_path = Path(__file__).parent.parent / "pipeline.yaml"
    if config_path.exists():
        import yaml
        with open(config_path) as f:
            return yaml.safe_load(f) or {}

    # Fall back to the [tool.workforce_kpi] table of pyproject.toml
    return get_env_config()


def build_pipeline_config(env: str, overrides: ConfigDict) -> PipelineConfig:
    return apply_overrides(load_pipeline_config(env), overrides)


def compute_period_snapshots(
    batches: list[PeriodBatch],
    config: PipelineConfig,
    reference_date: str | None = None,
) -> PeriodSnapshots:
    """One snapshot per period, taken at the period's last day unless overridden."""
    snapshots = {}
    for batch in batches:
        snapshots[batch.periode] = compute_metrics_snapshot(
            batch.employees,
            batch.remunerations,
            batch.absences,
            reference_date=reference_date or batch.reference_date,
            settings=config.engine,
        )
    return snapshots


def _comparison_snapshots(
    snapshots: PeriodSnapshots, period: str,
) -> tuple[MetricsSnapshot | None, MetricsSnapshot | None]:
    """The snapshot of the period before ``period`` and the one a year earlier."""
    periods = sorted(snapshots)
    index = periods.index(period)
    previous = snapshots[periods[index - 1]] if index > 0 else None
    last_year = str(pd.Period(period, freq="M") - 12)
    return previous, snapshots.get(last_year)


def print_validation(result: dict) -> None:
    table = Table(title="Validation Results")
    table.add_column("Valid")
    table.add_column("Details")
    if result["valid"]:
        table.add_row("[green]✓[/green]", "OK")
    for error in result["errors"]:
        table.add_row("[red]✗[/red]", error)
    console.print(table)


def print_summary(summary: ImportSummary) -> None:
    table = Table(title=f"Import summary: {summary.total_periods} period(s)")
    table.add_column("Période")
    table.add_column("Employés", justify="right")
    table.add_column("Rémunérations", justify="right")
    table.add_column("Absences", justify="right")
    for counts in summary.by_period:
        table.add_row(counts.periode, str(counts.employees), str(counts.remunerations), str(counts.absences))
    table.add_row(
        "[bold]Total[/bold]",
        str(summary.total_employees),
        str(summary.total_remunerations),
        str(summary.total_absences),
    )
    console.print(table)


def run_workbook(args: argparse.Namespace) -> None:
    file_config = load_config()
    config = build_pipeline_config(args.env, file_config)

    workbook = ingest.load_workbook(args.workbook)
    result = ingest.validate_workbook(workbook)
    if not result["valid"]:
        print_validation(result)
        raise ValueError(f"{args.workbook} failed validation with {len(result['errors'])} error(s)")

    batches = ingest.split_by_period(workbook)
    if not batches:
        raise ValueError(f"No employee records found in {args.workbook}")

    snapshots = compute_period_snapshots(batches, config, reference_date=args.reference_date)
    logger.info("Computed %d period snapshot(s) from %s", len(snapshots), args.workbook)
    period = args.period or max(snapshots)
    if period not in snapshots:
        raise ValueError(f"Period {period} not found, available: {', '.join(sorted(snapshots))}")

    establishment = file_config.get("establishments", {}).get(args.establishment) if args.establishment else None
    thresholds = resolve_thresholds(establishment, file_config.get("company"), config.thresholds)

    current = snapshots[period]
    previous, last_year = _comparison_snapshots(snapshots, period)
    cards = build_kpi_cards(current, previous, last_year, thresholds)
    alerts = build_alerts(current, thresholds)
    render_snapshot(current, cards, alerts, out=console)

    if args.output:
        match args.format or config.output_format:
            case "json":
                write_json(
                    {
                        "periode": period,
                        "snapshot": current.to_dict(),
                        "alerts": [asdict(alert) for alert in alerts],
                    },
                    args.output,
                )
            case "csv" | "excel" as fmt:
                write_output(build_trend_frame(list(snapshots.values())), args.output, fmt=fmt)
            case other:
                raise ValueError(f"Unsupported output format: {other}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Compute HR KPI snapshots from an import workbook")
    parser.add_argument("workbook", nargs="?", type=Path, help="EMPLOYES/REMUNERATION/ABSENCES workbook")
    parser.add_argument("--period", type=str, help="Period to report (YYYY-MM), defaults to the latest")
    parser.add_argument("--validate", action="store_true", help="Only validate, don't compute")
    parser.add_argument("--summary", action="store_true", help="Print row counts per period and exit")
    parser.add_argument("--reference-date", type=str, help="Override the snapshot reference date")
    parser.add_argument("--output", type=Path, help="Write the snapshot (json) or the period trend (csv, excel)")
    parser.add_argument("--format", choices=["json", "csv", "excel"], help="Output format")
    parser.add_argument("--env", type=str, default="development", help="Pipeline environment")
    parser.add_argument("--establishment", type=str, help="Establishment whose alert thresholds apply")
    parser.add_argument("--template", type=Path, help="Write the import template with sample rows and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        if args.template:
            ingest.write_import_template(args.template)
            return
        if args.workbook is None:
            parser.error("a workbook is required unless --template is given")

        if args.validate:
            result = ingest.validate(args.workbook)
            print_validation(result)
            if not result["valid"]:
                sys.exit(1)
        elif args.summary:
            print_summary(ingest.summarize_workbook(ingest.load_workbook(args.workbook)))
        else:
            run_workbook(args)
    except (FileNotFoundError, ValueError, pa.errors.SchemaError) as exc:
        console.print(f"[red]{exc}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
