"""Sequential batch runner with fixed pacing."""

import asyncio
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence
from rich.console import Console
from rich.markup import escape

from .config import ProcessingStats, RowOutcome, RowResult
from .clients import APIError
from .importer import ProductImporter
from .mapping import build_record, display_title
from .reporting import Reporter


SleepFunc = Callable[[float], Awaitable[Any]]


class BatchRunner:
    """Runs rows through the importer one at a time.

    A failure raised while importing a row is reported and the batch moves on
    to the next row after the longer ``error_delay``.
    """

    def __init__(
        self,
        importer: ProductImporter,
        reporter: Optional[Reporter] = None,
        console: Optional[Console] = None,
        row_delay: float = 0.7,
        error_delay: float = 2.0,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.importer = importer
        self.console = console or Console()
        self.reporter = reporter or Reporter(self.console)
        self.row_delay = row_delay
        self.error_delay = error_delay
        self._sleep = sleep

    async def run(self, rows: Sequence[Mapping[str, Any]]) -> ProcessingStats:
        self.reporter.stats.total_rows = len(rows)
        self.console.print(f"Found {len(rows)} row(s). Starting...")

        for index, row in enumerate(rows, 1):
            await self.run_row(index, row)

        self.console.print("\n[bold]All done.[/bold]")
        return self.reporter.stats

    async def run_row(self, row_number: int, row: Mapping[str, Any]) -> RowResult:
        self.console.print(f"\n[bold]Row {row_number}: {escape(display_title(row))}[/bold]")

        record = build_record(row)
        if record is None:
            self.console.print("  [yellow]Skipping row - Title required.[/yellow]")
            result = RowResult(row_number=row_number, outcome=RowOutcome.SKIPPED, error="Title required")
            self.reporter.add_result(result)
            return result

        delay = self.row_delay
        try:
            result = await self.importer.import_record(record, row_number)
        except APIError as e:
            result = self._errored(row_number, record.title, f"API error: {e}")
            delay = self.error_delay
        except Exception as e:
            result = self._errored(row_number, record.title, f"Unexpected error: {e}")
            delay = self.error_delay

        self.reporter.add_result(result)
        await self._sleep(delay)
        return result

    def _errored(self, row_number: int, title: str, message: str) -> RowResult:
        self.console.print(f"  [red]Error processing row: {escape(message)}[/red]")
        return RowResult(row_number=row_number, title=title, outcome=RowOutcome.ERRORED, error=message)
