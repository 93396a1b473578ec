"""Row partitioning for the invoice and invoice detail sheets."""

from payables_splitter.splitter.cells import cell_text, format_number
from payables_splitter.splitter.classifier import (
    ID_COLUMN,
    JOIN_COLUMN,
    classify_invoices,
    is_digits_only,
    partition_invoices,
)
from payables_splitter.splitter.columns import header_names, resolve_columns
from payables_splitter.splitter.join_filter import filter_details
from payables_splitter.splitter.types import ColumnMap, Partition, SplitSummary

__all__ = [
    "ID_COLUMN",
    "JOIN_COLUMN",
    "ColumnMap",
    "Partition",
    "SplitSummary",
    "cell_text",
    "classify_invoices",
    "filter_details",
    "format_number",
    "header_names",
    "is_digits_only",
    "partition_invoices",
    "resolve_columns",
]
