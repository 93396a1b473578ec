#!/usr/bin/env python3
"""Payables split orchestrator - load, partition, assemble and save.

This module orchestrates the complete split workflow:
1. Load the source payables workbook (legacy ``.xls``)
2. Resolve the ``IDINVC``/``CNTITEM`` header columns once per sheet
3. Partition invoice rows into P1 (digits-only IDINVC) and P2 (everything else)
4. Filter ``Invoice_Details`` by each partition's CNTITEM values
5. Assemble one workbook per partition (all other sheets copied unchanged)
6. Save each workbook with bounded retries and log the outcome

Usage (from project root):
    python -m payables_splitter.main_split
    python -m payables_splitter.main_split --source /path/RL_NEW_PAYABLES_TLC_TM.XLS --dest-dir /out
    python -m payables_splitter.main_split --no-formatting --max-attempts 3 --retry-delay 2

CLI Flags:
    --source            Source workbook (default: PAYABLES_SOURCE_PATH)
    --dest-dir          Output folder (default: PAYABLES_DEST_DIR)
    --no-formatting     Copy values only (skip fonts, widths, heights)
    --max-attempts      Write attempts per output file (default from config.json)
    --retry-delay       Seconds between write attempts (default from config.json)
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

# Add project root to path when running directly
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from payables_splitter.config import (  # noqa: E402
    DEST_DIR,
    SOURCE_PATH,
    get_config,
    get_output_paths,
    get_split_settings,
    run_timestamp,
    setup_logging,
)
from payables_splitter.exceptions import ConfigurationError  # noqa: E402
from payables_splitter.splitter import (  # noqa: E402
    SplitSummary,
    filter_details,
    partition_invoices,
    resolve_columns,
)
from payables_splitter.workbook import (  # noqa: E402
    WorkbookAssembler,
    get_sheet,
    open_source_workbook,
    other_sheet_names,
)
from payables_splitter.writer import RetryPolicy, save_workbook_with_retry  # noqa: E402

if TYPE_CHECKING:
    from collections.abc import Callable

logger = setup_logging(__name__)


# =============================================================================
# Main Processing
# =============================================================================


def split_payables(
    source_path: Path | None = None,
    dest_dir: Path | None = None,
    preserve_formatting: bool | None = None,
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] | None = None,
) -> SplitSummary:
    """Run the end-to-end split for one source workbook.

    Parameters
    ----------
    source_path : Path, optional
        Source ``.xls`` workbook; defaults to ``SOURCE_PATH``.
    dest_dir : Path, optional
        Output folder, created if missing; defaults to ``DEST_DIR``.
    preserve_formatting : bool, optional
        Copy styles, widths and heights; defaults to the config flag.
    policy : RetryPolicy, optional
        Write retry policy; defaults to the ``writer.retry`` config section.
    sleep : Callable[[float], None], optional
        Wait function between write attempts.

    Returns
    -------
    SplitSummary
        Row counts per partition and the written output paths.

    Raises
    ------
    ConfigurationError
        If a required sheet, header column or output path is missing.
        Nothing is written.
    OSError
        If the source cannot be read or an output cannot be written after
        the allowed attempts.
    """
    source_path = source_path if source_path is not None else SOURCE_PATH
    dest_dir = dest_dir if dest_dir is not None else DEST_DIR

    config = get_config()
    settings = get_split_settings(config)
    if preserve_formatting is None:
        preserve_formatting = settings["preserve_formatting"]
    policy = policy if policy is not None else RetryPolicy.from_config(config)
    output_paths = get_output_paths(dest_dir, source_path, config)

    logger.info("=== Run at %s UTC ===", run_timestamp().strftime("%Y-%m-%d %H:%M:%S"))

    # Step 1: Load source and locate required sheets/columns
    # Styles are always loaded so that styled blank rows count the same in both modes
    book = open_source_workbook(source_path)
    logger.info("Reading %s & %s sheets...", settings["invoice_sheet"], settings["detail_sheet"])
    invoice_sheet = get_sheet(book, settings["invoice_sheet"])
    detail_sheet = get_sheet(book, settings["detail_sheet"])

    id_column = settings["id_column"]
    join_column = settings["join_column"]
    invoice_columns = resolve_columns(invoice_sheet, [id_column, join_column])
    detail_columns = resolve_columns(detail_sheet, [join_column])

    # Step 2: Split invoices
    partitions = partition_invoices(invoice_sheet, invoice_columns, id_column=id_column, join_column=join_column)

    # Step 3: Filter details per partition
    detail_rows = {
        p.label: filter_details(detail_sheet, detail_columns, p.join_keys, join_column=join_column)
        for p in partitions
    }

    summary = SplitSummary(
        invoice_counts={p.label: p.data_row_count for p in partitions},
        detail_counts={label: len(rows) - 1 for label, rows in detail_rows.items()},
    )
    logger.info(" %s", summary.format_counts())
    logger.debug("Sheets copied unchanged: %s", other_sheet_names(book, (invoice_sheet.name, detail_sheet.name)))

    missing = [p.label for p in partitions if p.label not in output_paths]
    if missing:
        msg = f"No output path configured for partition(s) {missing} (check output.partitions in config.json)"
        raise ConfigurationError(msg)

    # Step 4: Build & save, one workbook at a time
    dest_dir.mkdir(parents=True, exist_ok=True)
    for partition in partitions:
        path = output_paths[partition.label]

        assembler = WorkbookAssembler(
            book,
            preserve_formatting=preserve_formatting,
            invoice_sheet=invoice_sheet.name,
            detail_sheet=detail_sheet.name,
        )
        workbook = assembler.build(partition.rows, detail_rows[partition.label])
        summary.output_paths[partition.label] = save_workbook_with_retry(workbook, path, policy, sleep=sleep)

    logger.info("Processing complete.")
    return summary


# =============================================================================
# CLI
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """Parse CLI flags and run the split.

    Returns
    -------
    int
        ``0`` when both workbooks were written; ``1`` otherwise.
    """
    parser = argparse.ArgumentParser(
        description="Split the payables workbook into P1 (numeric IDINVC) and P2 (other) workbooks.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m payables_splitter.main_split
  python -m payables_splitter.main_split --source in/RL_NEW_PAYABLES_TLC_TM.XLS --dest-dir out
  python -m payables_splitter.main_split --no-formatting
        """,
    )
    parser.add_argument("--source", type=Path, default=None, help=f"Source .xls workbook (default: {SOURCE_PATH})")
    parser.add_argument("--dest-dir", type=Path, default=None, help=f"Output folder (default: {DEST_DIR})")
    parser.add_argument("--no-formatting", action="store_true", help="Copy cell values only")
    parser.add_argument("--max-attempts", type=int, default=None, help="Write attempts per output file")
    parser.add_argument("--retry-delay", type=float, default=None, help="Seconds between write attempts")

    args = parser.parse_args(argv)

    try:
        policy = None
        if args.max_attempts is not None or args.retry_delay is not None:
            defaults = RetryPolicy.from_config()
            policy = RetryPolicy(
                max_attempts=args.max_attempts if args.max_attempts is not None else defaults.max_attempts,
                delay_seconds=args.retry_delay if args.retry_delay is not None else defaults.delay_seconds,
            )

        summary = split_payables(
            source_path=args.source,
            dest_dir=args.dest_dir,
            preserve_formatting=False if args.no_formatting else None,
            policy=policy,
        )
    except Exception:
        logger.exception("ERROR: payables split failed")
        return 1

    for label, path in summary.output_paths.items():
        logger.info("  ✓ %s: %s", label, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
