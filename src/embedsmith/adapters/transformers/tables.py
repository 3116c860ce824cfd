"""Convert delimited tabular data into an HTML table."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TYPE_CHECKING, Any

from embedsmith.core.exceptions import ConversionError, ReadFailureError


if TYPE_CHECKING:  # pragma: no cover - typing only
    from embedsmith.adapters.html.formatter import HtmlFormatter


def parse_header(header: str) -> list[str]:
    """Split a comma separated header description; blank means "use the first row"."""
    if not header.strip():
        return []
    return [cell.strip() for cell in header.split(",")]


def read_rows(path: Path, *, encoding: str = "utf-8") -> list[list[str]]:
    """Read every non-empty row of a CSV (or TSV, by extension) file."""
    delimiter = "\t" if path.suffix.lower() == ".tsv" else ","
    try:
        with path.open(encoding=encoding, newline="") as handle:
            return [row for row in csv.reader(handle, delimiter=delimiter) if row]
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise ReadFailureError(f"Unable to read table '{path.name}': {exc}") from exc


class TableStrategy:
    """Render a CSV file with a header description into an HTML table."""

    def __call__(
        self,
        source: Path | str,
        *,
        header: str = "",
        formatter: HtmlFormatter,
        encoding: str = "utf-8",
        **_: Any,
    ) -> str:
        path = Path(source)
        rows = read_rows(path, encoding=encoding)
        columns = parse_header(header)
        if not columns:
            if not rows:
                raise ConversionError(f"Table '{path.name}' is empty.")
            columns, rows = rows[0], rows[1:]
        width = len(columns)
        for number, row in enumerate(rows, start=1):
            if len(row) != width:
                raise ConversionError(
                    f"Row {number} of '{path.name}' has {len(row)} column(s), "
                    f"but the header has {width}."
                )
        return formatter.table(rows, header=columns)


__all__ = ["TableStrategy", "parse_header", "read_rows"]
