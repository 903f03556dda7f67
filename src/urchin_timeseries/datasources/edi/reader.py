"""Parse a downloaded EDI CSV into a pandas DataFrame."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from urchin_timeseries.datasources.edi.client import COLUMN_NAMES
from urchin_timeseries.exceptions import ParseError, SchemaMismatch
from urchin_timeseries.schemas import ColumnSummary, TableSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def _check_row_widths(path: Path) -> None:
    """Raise ParseError if a data row has a different field count than the first.

    pandas pads short rows with NaN instead of rejecting them.
    """
    with path.open(newline="", encoding="utf-8", errors="replace") as f:
        rows = csv.reader(f, delimiter=",", quotechar='"')
        next(rows, None)
        width: int | None = None
        for row in rows:
            if not row:
                continue
            if width is None:
                width = len(row)
            elif len(row) != width:
                msg = (
                    f"Malformed CSV in {path.name}: line {rows.line_num} has "
                    f"{len(row)} fields, expected {width}"
                )
                raise ParseError(msg)


def load(path: Path | str, column_names: Sequence[str] = COLUMN_NAMES) -> pd.DataFrame:
    """
    Read the CSV at ``path`` and delete the file afterwards.

    The file's own header line is skipped and ``column_names`` are assigned
    positionally. The file is removed whether or not parsing succeeds.

    Args:
        path: Local file produced by ``transfer.fetch``.
        column_names: Expected column labels, in file order.

    Returns:
        DataFrame with exactly ``len(column_names)`` columns.

    Raises:
        ParseError: Ragged rows, or no data lines after the header.
        SchemaMismatch: The file has a different number of columns.
    """
    path = Path(path)
    names = list(column_names)
    try:
        _check_row_widths(path)
        try:
            df = pd.read_csv(
                path,
                header=None,
                skiprows=1,
                sep=",",
                quotechar='"',
            )
        except pd.errors.EmptyDataError as e:
            raise ParseError(f"No data rows in {path.name}") from e
        except pd.errors.ParserError as e:
            raise ParseError(f"Malformed CSV in {path.name}: {e}") from e
    finally:
        path.unlink(missing_ok=True)

    if df.shape[1] != len(names):
        msg = f"Expected {len(names)} columns, found {df.shape[1]}"
        raise SchemaMismatch(msg, missing=names[df.shape[1] :])

    df.columns = names
    logger.info("Parsed %d rows x %d columns", df.shape[0], df.shape[1])
    return df


def glimpse(table: pd.DataFrame, samples: int = 3) -> TableSummary:
    """Shape, dtypes and a few leading values of each column."""
    columns = [
        ColumnSummary(
            name=str(name),
            dtype=str(table[name].dtype),
            samples=[str(v) for v in table[name].head(samples).tolist()],
        )
        for name in table.columns
    ]
    return TableSummary(rows=len(table), columns=columns)


def format_summary(summary: TableSummary) -> str:
    """Render a TableSummary as aligned plain text."""
    lines = [f"Rows: {summary.rows:,}", f"Columns: {summary.column_count}"]
    if not summary.columns:
        return "\n".join(lines)
    width = max(len(c.name) for c in summary.columns)
    for col in summary.columns:
        lines.append(f"$ {col.name:<{width}} <{col.dtype}> {', '.join(col.samples)}")
    return "\n".join(lines)
