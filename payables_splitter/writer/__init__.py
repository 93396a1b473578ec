"""Writer module for persisting split workbooks.

Output naming: <source stem>_P1.xls and <source stem>_P2.xls in the
destination folder, each replaced in place with bounded retries.
"""

from payables_splitter.writer.retry import RetryPolicy, is_transient_io_error, run_with_retry
from payables_splitter.writer.workbook_writer import (
    save_workbook_with_retry,
    serialize_workbook,
    write_bytes_replacing,
)

__all__ = [
    "RetryPolicy",
    "is_transient_io_error",
    "run_with_retry",
    "save_workbook_with_retry",
    "serialize_workbook",
    "write_bytes_replacing",
]
