"""Workbook reading and assembly for legacy ``.xls`` files.

Source workbooks are read with xlrd; split workbooks are built with xlwt.
"""

from payables_splitter.workbook.assembler import (
    DETAIL_SHEET,
    INVOICE_SHEET,
    WorkbookAssembler,
    assemble_workbook,
    other_sheet_names,
)
from payables_splitter.workbook.source import get_sheet, open_source_workbook
from payables_splitter.workbook.styles import StyleCache

__all__ = [
    "DETAIL_SHEET",
    "INVOICE_SHEET",
    "StyleCache",
    "WorkbookAssembler",
    "assemble_workbook",
    "get_sheet",
    "open_source_workbook",
    "other_sheet_names",
]
