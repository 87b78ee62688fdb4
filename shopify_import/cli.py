"""Command-line interface for the Shopify product importer."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.logging import RichHandler

from .config import ConfigError, ImportConfig, load_config_from_env
from .clients import ShopifyClient
from .importer import ProductImporter
from .mapping import build_record
from .reporting import Reporter
from .runner import BatchRunner
from .sheet_io import SheetProcessor


app = typer.Typer(
    name="shopify-import",
    help="Create or update Shopify products from a spreadsheet",
    rich_markup_mode="rich"
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def run(
    file: Optional[Path] = typer.Argument(None, help="Spreadsheet to import (.xlsx or .csv); defaults to $XLSX_FILE"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Process only first N rows"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview mapped rows without contacting the store"),
    row_delay: Optional[float] = typer.Option(None, "--row-delay", help="Seconds to wait after each row"),
    error_delay: Optional[float] = typer.Option(None, "--error-delay", help="Seconds to wait after a failed row"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log GraphQL requests"),
):
    """Import products from a spreadsheet into Shopify."""
    _configure_logging(verbose)

    try:
        config = load_config_from_env(
            require_credentials=not dry_run,
            limit=limit,
            dry_run=dry_run,
            row_delay=row_delay,
            error_delay=error_delay,
        )
    except (ConfigError, ValidationError) as e:
        console.print(f"[red]ERROR: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    if file is None and os.getenv("XLSX_FILE"):
        file = Path(os.environ["XLSX_FILE"])
    if file is None:
        console.print("[red]Usage: shopify-import path/to/products.xlsx (or set XLSX_FILE)[/red]")
        raise typer.Exit(1)
    if not file.exists():
        console.print(f"[red]File not found: {file}[/red]")
        raise typer.Exit(1)

    try:
        asyncio.run(_import_main(file, config))
    except KeyboardInterrupt:
        console.print("\n[yellow]Import cancelled by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Fatal: {escape(str(e))}[/red]")
        raise typer.Exit(1)


async def _import_main(file: Path, config: ImportConfig) -> None:
    """Main import logic."""
    sheet = SheetProcessor(console)
    reporter = Reporter(console)

    console.print("[bold cyan]Shopify Product Import[/bold cyan]\n")
    rows = sheet.read_rows(file, config.limit)

    if config.dry_run:
        reporter.print_record_preview([build_record(row) for row in rows])
        return

    async with ShopifyClient(config.shopify) as client:
        runner = BatchRunner(
            ProductImporter(client, console),
            reporter,
            console,
            row_delay=config.row_delay,
            error_delay=config.error_delay,
        )
        await runner.run(rows)

    console.print(f"\n{'='*60}")
    reporter.print_summary()
    console.print(f"{'='*60}")


if __name__ == "__main__":
    app()
