"""Spreadsheet input handling."""

from pathlib import Path
from typing import Any, Dict, List, Optional
import pandas as pd
from rich.console import Console


EXCEL_SUFFIXES = {".xlsx", ".xlsm"}


class SheetProcessor:
    """Reads the first sheet of a workbook (or a CSV file) into row dicts."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def read_frame(self, file_path: Path) -> pd.DataFrame:
        """Read the file with the header row as column names.

        Cells are read as strings and blanks as ''; the mapper owns trimming.
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        suffix = file_path.suffix.lower()
        try:
            if suffix in EXCEL_SUFFIXES:
                df = pd.read_excel(file_path, sheet_name=0, dtype=str, keep_default_na=False)
            elif suffix == ".csv":
                df = pd.read_csv(file_path, encoding="utf-8", dtype=str, keep_default_na=False)
            else:
                raise ValueError(f"Unsupported file type: {suffix or '(none)'}")
        except (ValueError, OSError) as e:
            raise ValueError(f"Failed to read {file_path}: {e}") from e

        # Header cells may carry stray whitespace
        df.columns = [str(column).strip() for column in df.columns]
        return df

    def read_rows(self, file_path: Path, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Read rows as dicts keyed by header name."""
        df = self.read_frame(file_path)

        if limit:
            df = df.head(limit)
            self.console.print(f"[yellow]Limited to first {limit} rows for processing[/yellow]")

        self.console.print(f"[green]Loaded {len(df)} rows from {file_path}[/green]")
        return df.to_dict(orient="records")
