"""Resilient writer - persist a workbook to a path that may be briefly locked.

Destination folders are usually network shares where another user may have the
previous output open. Each attempt deletes the old file if present and writes
the new one; lock/availability failures are retried with a fixed delay.

The workbook is serialized to memory before the first attempt, so errors in the
workbook itself surface immediately and are never retried, and a failed write
never leaves a half-written file behind.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from payables_splitter.config import setup_logging
from payables_splitter.writer.retry import RetryPolicy, run_with_retry

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    import xlwt

logger = setup_logging(__name__)


def serialize_workbook(workbook: xlwt.Workbook) -> bytes:
    """Render an xlwt workbook to ``.xls`` bytes."""
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def write_bytes_replacing(path: Path, payload: bytes) -> None:
    """Delete ``path`` if present, then write ``payload`` to a fresh file.

    A file left behind by a failed write is removed before the error
    propagates.
    """
    if path.exists():
        logger.debug("Deleting existing file: %s", path)
        path.unlink()

    # "xb" fails instead of truncating if another process recreated the file
    try:
        with path.open("xb") as output_file:
            output_file.write(payload)
    except FileExistsError as e:
        msg = f"File reappeared while writing: {path}"
        raise BlockingIOError(e.errno, msg) from e
    except OSError:
        _discard_partial(path)
        raise


def _discard_partial(path: Path) -> None:
    """Best-effort removal of a file left by an interrupted write."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove partial file %s: %s", path, e)


def save_workbook_with_retry(
    workbook: xlwt.Workbook,
    path: Path,
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] | None = None,
) -> Path:
    """Persist ``workbook`` to ``path``, retrying transient lock failures.

    Parameters
    ----------
    workbook : xlwt.Workbook
        Workbook to save.
    path : Path
        Destination ``.xls`` path. The parent folder must exist.
    policy : RetryPolicy, optional
        Retry policy; defaults to the ``writer.retry`` config section.
    sleep : Callable[[float], None], optional
        Wait function between attempts (``time.sleep`` when omitted).

    Returns
    -------
    Path
        The written path.

    Raises
    ------
    OSError
        The last lock/availability error once all attempts are exhausted, or
        any other I/O error immediately.
    """
    policy = policy if policy is not None else RetryPolicy.from_config()
    payload = serialize_workbook(workbook)

    def attempt() -> None:
        write_bytes_replacing(path, payload)

    run_with_retry(attempt, policy, sleep=sleep, description=f"saving {path.name}")

    logger.info("Saved → %s (%d bytes)", path, len(payload))
    return path
