"""
Command-line interface for the ledger reconciliation tool.
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .api import run_server
from .config import load_config, generate_default_config, ReconConfig
from .loaders import CompanionCSVLoader, PrimaryXMLLoader
from .models.transaction import FailureReason
from .pipeline import run_reconciliation, verdict_message
from .utils.exceptions import ReconciliationError
from .utils.logging_config import level_from_name, setup_logging

console = Console()

# Exit status when --fail-on-failures is set and failures were found
FAILURES_EXIT_CODE = 2


@click.group()
@click.version_option(version="0.1.0")
def main():
    """Ledger Transaction Reconciliation Tool."""
    pass


@main.command()
@click.argument("primary_file", type=click.Path(exists=True, path_type=Path))
@click.argument("companion_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option(
    "-o", "--output-dir", type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the report files",
)
@click.option("--excel", is_flag=True, help="Also write the Excel workbook")
@click.option(
    "--strict-malformed",
    is_flag=True,
    help="Abort on a non-numeric balance field instead of reporting it",
)
@click.option(
    "--fail-on-failures",
    is_flag=True,
    help=f"Exit with status {FAILURES_EXIT_CODE} when any transaction fails",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "--dry-run", is_flag=True, help="Reconcile and show summary without writing reports"
)
def reconcile(
    primary_file: Path,
    companion_file: Path,
    config: Optional[Path],
    output_dir: Optional[Path],
    excel: bool,
    strict_malformed: bool,
    fail_on_failures: bool,
    verbose: bool,
    dry_run: bool,
):
    """
    Reconcile a primary XML transaction log with its companion CSV.

    PRIMARY_FILE: Path to the XML transaction file
    COMPANION_FILE: Path to the companion CSV file
    """
    try:
        recon_config = load_config(config)
        _setup_logging(recon_config, verbose)

        # Apply command-line overrides
        if output_dir is not None:
            recon_config.output.directory = str(output_dir)
        if excel:
            recon_config.output.excel.enabled = True
        if strict_malformed:
            recon_config.reconciliation.strict_malformed = True
        if fail_on_failures:
            recon_config.reconciliation.fail_on_failures = True

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Running reconciliation...", total=None)
            result = run_reconciliation(
                recon_config, primary_file, companion_file, dry_run=dry_run
            )
            progress.update(task, completed=True)

    except ReconciliationError as e:
        console.print(f"[red]Error: {e}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)

    _display_summary(result.summary)

    if dry_run:
        console.print("\n[yellow]Dry run - no report written[/yellow]")
    elif result.report_paths:
        paths = result.report_paths
        console.print(f"\n[green]JSON dump: {paths.json_path}[/green]")
        console.print(f"[green]CSV report: {paths.csv_path}[/green]")
        if paths.excel_path:
            console.print(f"[green]Excel report: {paths.excel_path}[/green]")

    click.echo(verdict_message(result, recon_config))

    if result.has_failures and recon_config.reconciliation.fail_on_failures:
        sys.exit(FAILURES_EXIT_CODE)


@main.command()
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
@click.option("--host", default=None, help="Bind address (overrides config)")
@click.option("--port", type=int, default=None, help="Port (overrides config)")
@click.option(
    "--report",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="CSV report to serve (defaults to the configured output)",
)
def serve(
    config: Optional[Path],
    host: Optional[str],
    port: Optional[int],
    report: Optional[Path],
):
    """Serve the CSV failure report over HTTP."""
    try:
        recon_config = load_config(config)
    except ReconciliationError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    _setup_logging(recon_config, verbose=False)
    run_server(recon_config, host=host, port=port, report_path=report)


@main.command("parse-primary")
@click.argument("primary_file", type=click.Path(exists=True, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def parse_primary(primary_file: Path, config: Optional[Path]):
    """
    Parse a primary XML file and display transaction summary.

    PRIMARY_FILE: Path to the XML transaction file
    """
    try:
        recon_config = load_config(config)
        loader = PrimaryXMLLoader(recon_config)
        transactions = loader.load(primary_file)

        table = Table(title=f"Primary Transactions: {primary_file.name}")
        table.add_column("Reference")
        table.add_column("Account")
        table.add_column("Start", justify="right")
        table.add_column("Mutation", justify="right")
        table.add_column("End", justify="right")
        table.add_column("Description")

        for txn in transactions[:20]:  # Show first 20
            table.add_row(
                txn.reference,
                txn.account_number or "-",
                txn.start_balance,
                txn.mutation,
                txn.end_balance,
                (
                    txn.description[:40] + "..."
                    if len(txn.description) > 40
                    else txn.description
                ),
            )

        console.print(table)

        if len(transactions) > 20:
            console.print(f"\n... and {len(transactions) - 20} more transactions")

        console.print(f"\nTotal transactions: {len(transactions)}")

        summary = loader.get_file_summary(primary_file)
        console.print(f"Accounts: {len(summary['accounts'])}")
        _display_reference_summary(summary)

    except ReconciliationError as e:
        console.print(f"[red]Error parsing file: {e}[/red]")
        sys.exit(1)


@main.command("parse-companion")
@click.argument("companion_file", type=click.Path(exists=True, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
def parse_companion(companion_file: Path, config: Optional[Path]):
    """
    Parse a companion CSV file and display record summary.

    COMPANION_FILE: Path to the companion CSV file
    """
    try:
        recon_config = load_config(config)
        loader = CompanionCSVLoader(recon_config)
        records = loader.load(companion_file)

        table = Table(title=f"Companion Records: {companion_file.name}")
        table.add_column("Reference")
        table.add_column("Fields")

        for record in records[:20]:  # Show first 20
            fields = ", ".join(f"{k}={v}" for k, v in record.fields.items())
            table.add_row(record.reference, fields[:60])

        console.print(table)

        if len(records) > 20:
            console.print(f"\n... and {len(records) - 20} more records")

        console.print(f"\nTotal records: {len(records)}")

        summary = loader.get_file_summary(companion_file)
        console.print(f"Columns: {', '.join(summary['columns'])}")
        _display_reference_summary(summary)

    except ReconciliationError as e:
        console.print(f"[red]Error parsing file: {e}[/red]")
        sys.exit(1)


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _setup_logging(config: ReconConfig, verbose: bool) -> None:
    log_config = config.logging
    level = logging.DEBUG if verbose else level_from_name(log_config.level)
    setup_logging(
        level,
        log_file=Path(log_config.file) if log_config.file else None,
        log_format=log_config.format,
    )


def _display_reference_summary(summary: dict) -> None:
    """Print the reference counts from a loader's file summary."""
    console.print(f"Distinct references: {summary['distinct_references']}")
    duplicates = summary["duplicate_references"]
    if duplicates:
        console.print(f"[yellow]Duplicate references: {', '.join(duplicates)}[/yellow]")
    else:
        console.print("Duplicate references: none")


def _display_summary(summary) -> None:
    """Display reconciliation summary in console."""
    table = Table(title="Reconciliation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Primary Records", str(summary.total_primary_records))
    table.add_row("Companion Records", str(summary.total_companion_records))
    table.add_row("Failure Entries", str(summary.failure_count))
    table.add_row("Failed References", str(summary.failed_reference_count))
    for reason in FailureReason:
        count = summary.failures_by_reason.get(reason.value, 0)
        table.add_row(f"  {reason.value}", str(count))
    table.add_row("Pass Rate", f"{summary.pass_rate:.1f}%")
    table.add_row("Processing Time", f"{summary.processing_time_seconds:.2f}s")

    console.print(table)


if __name__ == "__main__":
    main()
