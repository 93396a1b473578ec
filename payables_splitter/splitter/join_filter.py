"""Join filter - keep detail rows whose join key was admitted by a partition."""

from __future__ import annotations

from typing import TYPE_CHECKING

from payables_splitter.splitter.cells import cell_text, is_hole, row_cell
from payables_splitter.splitter.classifier import JOIN_COLUMN
from payables_splitter.splitter.columns import HEADER_ROW

if TYPE_CHECKING:
    from collections.abc import Set

    from xlrd.sheet import Sheet

    from payables_splitter.splitter.types import ColumnMap


def filter_details(
    sheet: Sheet,
    columns: ColumnMap,
    join_keys: Set[str],
    join_column: str = JOIN_COLUMN,
) -> list[int]:
    """Return the detail rows matching a partition's join keys.

    Parameters
    ----------
    sheet : Sheet
        Detail sheet, header at row 0.
    columns : ColumnMap
        Resolved columns for ``sheet``; must contain ``join_column``.
    join_keys : Set[str]
        Join-key texts admitted by the partition.
    join_column : str, optional
        Header text of the join-key column.

    Returns
    -------
    list[int]
        Header row index followed by matching row indexes in source order.
    """
    join_col = columns[join_column]
    datemode = sheet.book.datemode if sheet.book is not None else 0

    rows = [HEADER_ROW]
    for rowx in range(HEADER_ROW + 1, sheet.nrows):
        if is_hole(sheet, rowx):
            continue
        if cell_text(row_cell(sheet, rowx, join_col), datemode) in join_keys:
            rows.append(rowx)
    return rows
