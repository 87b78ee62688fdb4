"""Console reporting for import runs."""

from typing import List, Optional, Sequence
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ImportRecord, ProcessingStats, RowOutcome, RowResult


class Reporter:
    """Collects row results and prints summaries."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self.stats = ProcessingStats()
        self.failures: List[RowResult] = []

    def add_result(self, result: RowResult) -> None:
        """Add a row result to statistics and failures tracking."""
        self.stats.add_result(result)

        if result.outcome == RowOutcome.ERRORED or result.has_problems:
            self.failures.append(result)

    def print_summary(self) -> None:
        """Print a summary of the processing results."""
        table = Table(title="IMPORT SUMMARY", show_header=True, header_style="bold magenta")
        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Count", justify="right", style="green")

        table.add_row("Total Rows", str(self.stats.total_rows))
        table.add_row("Created", str(self.stats.created))
        table.add_row("Updated", str(self.stats.updated))
        table.add_row("Skipped", str(self.stats.skipped))
        table.add_row("Errored", str(self.stats.errored))
        table.add_row("With Problems", str(self.stats.with_problems))

        self.console.print(table)

        if self.failures:
            self.console.print(f"\n[red]Found {len(self.failures)} row(s) with errors:[/red]")
            error_table = Table(show_header=True, header_style="bold red")
            error_table.add_column("Row", justify="right", style="yellow")
            error_table.add_column("Title", style="cyan")
            error_table.add_column("Outcome")
            error_table.add_column("Error", style="red")

            for failure in self.failures[:10]:
                message = "; ".join(filter(None, [failure.error] + failure.problems))
                error_table.add_row(
                    str(failure.row_number),
                    escape(failure.title),
                    failure.outcome.value,
                    escape(message[:80] + "..." if len(message) > 80 else message)
                )

            if len(self.failures) > 10:
                error_table.add_row("...", "...", "...", f"and {len(self.failures) - 10} more")

            self.console.print(error_table)

    def print_record_preview(self, records: Sequence[Optional[ImportRecord]]) -> None:
        """Show mapped records without contacting the store."""
        table = Table(title="DRY RUN PREVIEW", show_header=True, header_style="bold blue")
        table.add_column("Row", justify="right", style="yellow")
        table.add_column("Title", style="cyan")
        table.add_column("Action")
        table.add_column("Tags")
        table.add_column("Media", justify="right")
        table.add_column("Variant")

        for row_number, record in enumerate(records, 1):
            if record is None:
                table.add_row(str(row_number), "(no title)", "[yellow]skip[/yellow]", "", "", "")
                continue

            if record.identity.remote_id:
                action = f"update {record.identity.remote_id}"
            elif record.identity.handle:
                action = f"lookup handle {record.identity.handle}"
            else:
                action = "create"

            variant = record.variant
            variant_fields = ", ".join(
                f"{name}={value}"
                for name, value in (("price", variant.price), ("sku", variant.sku), ("barcode", variant.barcode))
                if value is not None
            )

            table.add_row(
                str(row_number),
                escape(record.title),
                escape(action),
                escape(", ".join(record.tags)),
                str(len(record.media)),
                escape(variant_fields) or "-",
            )

        self.console.print(table)
