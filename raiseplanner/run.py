"""Command-line raise planner: ingest exports, merge employees, recommend raises."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import pandas as pd
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from raiseplanner.config import Settings, load_settings
from raiseplanner.domains.analysis import build_recommendation_table
from raiseplanner.domains.ingestion import FileUploadResult, parse_path
from raiseplanner.domains.session import AppState, JsonBackupStore, apply_upload, recover_session, set_budget
from raiseplanner.domains.session.store import MemoryEmployeeStore
from raiseplanner.utils.formatting import format_currency, format_percentage
from raiseplanner.utils.io import write_output
from raiseplanner.utils.types import FileType

console = Console()
logger = logging.getLogger("raiseplanner")

PRIORITY_STYLES = {"Critical": "bold red", "High": "red", "Medium": "yellow", "Low": "green"}


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


async def ingest_all(paths: list[Path], expected_type: FileType, settings: Settings) -> list[FileUploadResult]:
    tasks = [parse_path(path, expected_type, settings.ingestion) for path in paths]
    return list(await asyncio.gather(*tasks))


def render_uploads(results: list[FileUploadResult]) -> None:
    table = Table(title="Ingestion Results")
    table.add_column("File")
    table.add_column("Type")
    table.add_column("Rows", justify="right")
    table.add_column("Valid", justify="right")
    table.add_column("Details")

    for r in results:
        status = "[green]✓[/green]" if r.valid_rows > 0 else "[red]✗[/red]"
        detail = r.errors[0] if r.errors else "OK"
        if len(r.errors) > 1:
            detail += f" (+{len(r.errors) - 1} more)"
        table.add_row(f"{status} {r.file_name}", str(r.file_type), str(r.row_count), str(r.valid_rows), detail)

    console.print(table)


def render_recommendations(df: pd.DataFrame, state: AppState) -> None:
    table = Table(title=f"Raise Recommendations (budget {format_currency(state.total_budget, state.budget_currency)})")
    table.add_column("Employee")
    table.add_column("Name")
    table.add_column("Comparatio", justify="right")
    table.add_column("Tenure")
    table.add_column("Risk", justify="right")
    table.add_column("Recommended", justify="right")
    table.add_column("%", justify="right")
    table.add_column("Priority")

    for row in df.itertuples(index=False):
        style = PRIORITY_STYLES.get(row.priority, "")
        table.add_row(
            row.employeeId,
            row.name or "",
            format_percentage(row.comparatio, 0),
            row.tenureBand,
            f"{row.totalRisk} ({row.riskLevel})",
            format_currency(row.recommendedAmount),
            format_percentage(row.recommendedPercent),
            f"[{style}]{row.priority}[/{style}]" if style else row.priority,
        )

    console.print(table)
    total = int(df["recommendedAmount"].sum()) if not df.empty else 0
    console.print(f"Total recommended: [bold]{format_currency(total)}[/bold]")


async def plan(args: argparse.Namespace, settings: Settings) -> int:
    backup = JsonBackupStore(args.backup, settings.budget.backup_debounce_ms) if args.backup else None
    state = await recover_session(MemoryEmployeeStore(), backup)

    results = await ingest_all(args.files, FileType(args.type), settings)
    render_uploads(results)

    if args.validate:
        return 0 if all(r.valid_rows > 0 for r in results) else 1

    for result in results:
        state = apply_upload(state, result)
    for warning in state.warnings:
        logger.warning(warning)

    budget = args.budget if args.budget is not None else state.total_budget
    currency = args.currency or state.budget_currency or settings.budget.default_currency
    state = set_budget(state, budget, currency)

    if not state.has_data:
        console.print("[red]No employees to analyse; upload a salary export.[/red]")
        return 1

    df = build_recommendation_table(state.employees, state.total_budget, config=settings.analysis)
    render_recommendations(df, state)

    if args.output:
        write_output(df, args.output, args.format)
    if backup is not None:
        backup.schedule_backup(state.employees, state.total_budget, state.budget_currency, 0)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Plan compensation raises from HRIS exports")
    parser.add_argument("files", nargs="+", type=Path, help="Salary and/or performance exports (csv, xlsx, xls)")
    parser.add_argument("--type", choices=[t.value for t in FileType], default=FileType.UNKNOWN.value,
                        help="Expected file type for all inputs")
    parser.add_argument("--budget", type=float, help="Total raise budget (USD)")
    parser.add_argument("--currency", type=str, help="Budget currency code")
    parser.add_argument("--env", type=str, default="production", help="Settings environment")
    parser.add_argument("--output", type=Path, help="Write the recommendation table here")
    parser.add_argument("--format", choices=["csv", "json", "excel"], default="csv")
    parser.add_argument("--backup", type=Path, help="JSON backup snapshot to restore from and write to")
    parser.add_argument("--validate", action="store_true", help="Only ingest and validate the files")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    configure_logging(args.verbose)
    try:
        settings = load_settings(args.env)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        sys.exit(2)

    sys.exit(asyncio.run(plan(args, settings)))


if __name__ == "__main__":
    main()
