"""Split dataclasses and type definitions.

This module contains pure data structures with no business logic dependencies,
ensuring they can be imported without circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

__all__ = [
    "ColumnMap",
    "Partition",
    "SplitSummary",
]


@dataclass(frozen=True)
class ColumnMap:
    """Header names resolved to column indexes for one sheet.

    Attributes
    ----------
        sheet_name: Name of the sheet whose header row was scanned
        indexes: Mapping from header text to zero-based column index
    """

    sheet_name: str
    indexes: dict[str, int]

    def __getitem__(self, name: str) -> int:
        return self.indexes[name]

    def __contains__(self, name: object) -> bool:
        return name in self.indexes


@dataclass
class Partition:
    """Invoice rows admitted by one side of the identifier predicate.

    Attributes
    ----------
        label: Partition label ("P1" for digits-only identifiers, "P2" otherwise)
        rows: Source row indexes, header row (0) first
        join_keys: Distinct join-key texts observed in the data rows
    """

    label: str
    rows: list[int] = field(default_factory=list)
    join_keys: set[str] = field(default_factory=set)

    @property
    def data_row_count(self) -> int:
        """Number of admitted rows, header excluded."""
        return max(len(self.rows) - 1, 0)


@dataclass
class SplitSummary:
    """Outcome of one split run, per partition label."""

    invoice_counts: dict[str, int] = field(default_factory=dict)
    detail_counts: dict[str, int] = field(default_factory=dict)
    output_paths: dict[str, Path] = field(default_factory=dict)

    def format_counts(self) -> str:
        """Render counts as ``P1 invoices: 3 rows, P2 invoices: 2 rows; ...``."""
        invoices = ", ".join(f"{label} invoices: {n} rows" for label, n in self.invoice_counts.items())
        details = ", ".join(f"{label} details: {n} rows" for label, n in self.detail_counts.items())
        return f"{invoices}; {details}"
