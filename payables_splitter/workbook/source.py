"""Source workbook access for legacy ``.xls`` files.

The source is read once with ``xlrd``. Rows are kept ragged so that a row with
no stored cells reads back with length 0 and can be told apart from a row of
blank but formatted cells.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import xlrd

from payables_splitter.config import setup_logging
from payables_splitter.exceptions import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

    from xlrd.book import Book
    from xlrd.sheet import Sheet

logger = setup_logging(__name__)


def open_source_workbook(path: Path, formatting_info: bool = True) -> Book:
    """Read a legacy binary workbook into memory.

    Parameters
    ----------
    path : Path
        Location of the ``.xls`` file.
    formatting_info : bool, optional
        Load the style table (fonts, XF records, column/row info) so that
        formatting can be copied to the outputs.

    Returns
    -------
    xlrd.book.Book
        Fully loaded workbook; the file handle is released on return.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    xlrd.XLRDError
        If the file is not a readable ``.xls`` workbook.
    """
    if not path.exists():
        msg = f"Source workbook not found: {path}"
        raise FileNotFoundError(msg)

    logger.info("Loading source workbook: %s", path)
    book = xlrd.open_workbook(str(path), formatting_info=formatting_info, ragged_rows=True)
    logger.debug("Loaded %d sheets: %s", book.nsheets, book.sheet_names())
    return book


def get_sheet(book: Book, name: str) -> Sheet:
    """Return a sheet by name.

    Raises
    ------
    ConfigurationError
        If the workbook has no sheet with that name.
    """
    if name not in book.sheet_names():
        msg = f"Required sheet '{name}' not found (available: {book.sheet_names()})"
        raise ConfigurationError(msg)
    return book.sheet_by_name(name)
