"""Row classifier - partition invoice rows by their identifier text.

P1 holds rows whose identifier is made only of decimal digits; P2 holds every
other row, including rows with an empty or missing identifier. Rows with no
stored cells are skipped from both partitions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from payables_splitter.config import setup_logging
from payables_splitter.splitter.cells import cell_text, is_hole, row_cell
from payables_splitter.splitter.columns import HEADER_ROW
from payables_splitter.splitter.types import Partition

if TYPE_CHECKING:
    from xlrd.sheet import Sheet

    from payables_splitter.splitter.types import ColumnMap

logger = setup_logging(__name__)

ID_COLUMN = "IDINVC"
JOIN_COLUMN = "CNTITEM"


def is_digits_only(text: str) -> bool:
    """Return ``True`` if ``text`` is non-empty and every character is a decimal digit.

    Examples
    --------
    >>> is_digits_only("12345")
    True
    >>> is_digits_only("AB123")
    False
    >>> is_digits_only("")
    False
    """
    return text.isdecimal()


def classify_invoices(
    sheet: Sheet,
    columns: ColumnMap,
    numeric_only: bool,
    id_column: str = ID_COLUMN,
    join_column: str = JOIN_COLUMN,
) -> Partition:
    """Collect the invoice rows on one side of the identifier predicate.

    Parameters
    ----------
    sheet : Sheet
        Invoice sheet, header at row 0. Not modified.
    columns : ColumnMap
        Resolved columns for ``sheet``; must contain ``id_column`` and
        ``join_column``.
    numeric_only : bool
        ``True`` keeps digits-only identifiers (P1), ``False`` keeps the rest (P2).
    id_column : str, optional
        Header text of the identifier column.
    join_column : str, optional
        Header text of the join-key column.

    Returns
    -------
    Partition
        Header row index followed by admitted row indexes, plus the distinct
        join-key texts of those rows.
    """
    id_col = columns[id_column]
    join_col = columns[join_column]
    datemode = sheet.book.datemode if sheet.book is not None else 0

    partition = Partition(label="P1" if numeric_only else "P2", rows=[HEADER_ROW])

    for rowx in range(HEADER_ROW + 1, sheet.nrows):
        if is_hole(sheet, rowx):
            continue

        id_text = cell_text(row_cell(sheet, rowx, id_col), datemode)
        if is_digits_only(id_text) != numeric_only:
            continue

        partition.rows.append(rowx)
        partition.join_keys.add(cell_text(row_cell(sheet, rowx, join_col), datemode))

    logger.debug(
        "%s: %d invoice rows, %d distinct %s values",
        partition.label,
        partition.data_row_count,
        len(partition.join_keys),
        join_column,
    )
    return partition


def partition_invoices(
    sheet: Sheet,
    columns: ColumnMap,
    id_column: str = ID_COLUMN,
    join_column: str = JOIN_COLUMN,
) -> tuple[Partition, Partition]:
    """Split the invoice sheet into ``(P1, P2)``."""
    return (
        classify_invoices(sheet, columns, numeric_only=True, id_column=id_column, join_column=join_column),
        classify_invoices(sheet, columns, numeric_only=False, id_column=id_column, join_column=join_column),
    )
