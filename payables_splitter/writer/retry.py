"""Bounded retry with a fixed delay between attempts.

The policy is independent of the action it wraps: callers pass any zero-argument
callable and the policy decides, per exception, whether another attempt is
allowed. Exceptions the policy does not classify as retriable propagate on the
first occurrence.
"""

from __future__ import annotations

import errno
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from payables_splitter.config import get_retry_settings, setup_logging

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

logger = setup_logging(__name__)

T = TypeVar("T")

# EACCES/EBUSY cover SMB shares and locked files on POSIX
TRANSIENT_ERRNOS = frozenset({errno.EACCES, errno.EAGAIN, errno.EBUSY, errno.ETXTBSY, errno.EIO})
# ERROR_SHARING_VIOLATION, ERROR_LOCK_VIOLATION
TRANSIENT_WINERRORS = frozenset({32, 33})


def is_transient_io_error(exc: BaseException) -> bool:
    """Classify an exception as a lock or availability failure worth retrying.

    Parameters
    ----------
    exc : BaseException
        Exception raised by a file operation.

    Returns
    -------
    bool
        ``True`` for permission/lock/busy style ``OSError`` instances;
        ``False`` for everything else, including non-I/O errors.
    """
    if not isinstance(exc, OSError):
        return False
    if isinstance(exc, (PermissionError, BlockingIOError, TimeoutError, InterruptedError, ConnectionError)):
        return True
    if getattr(exc, "winerror", None) in TRANSIENT_WINERRORS:
        return True
    return exc.errno in TRANSIENT_ERRNOS


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how patiently to retry an action.

    Attributes
    ----------
        max_attempts: Total attempts including the first one
        delay_seconds: Fixed wait between consecutive attempts
        retry_on: Predicate deciding whether an exception is retriable
    """

    max_attempts: int = 5
    delay_seconds: float = 1.0
    retry_on: Callable[[BaseException], bool] = field(default=is_transient_io_error)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.delay_seconds < 0:
            msg = f"delay_seconds must not be negative, got {self.delay_seconds}"
            raise ValueError(msg)

    @classmethod
    def from_config(cls, config: dict[str, Any] | None = None) -> RetryPolicy:
        """Build a policy from the ``writer.retry`` section of ``config.json``."""
        settings = get_retry_settings(config)
        return cls(max_attempts=settings["max_attempts"], delay_seconds=settings["delay_seconds"])


def run_with_retry(
    action: Callable[[], T],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], None] | None = None,
    description: str = "operation",
) -> T:
    """Run ``action`` until it succeeds or the policy gives up.

    Parameters
    ----------
    action : Callable[[], T]
        Zero-argument callable performing one attempt.
    policy : RetryPolicy, optional
        Retry policy; defaults to five attempts one second apart.
    sleep : Callable[[float], None], optional
        Blocking wait used between attempts; ``time.sleep`` when omitted.
    description : str, optional
        Label used in log messages.

    Returns
    -------
    T
        Whatever ``action`` returns on the first successful attempt.

    Raises
    ------
    Exception
        The last retriable exception once attempts are exhausted, or the first
        non-retriable exception immediately.
    """
    policy = policy if policy is not None else RetryPolicy()
    sleep = sleep if sleep is not None else time.sleep

    for attempt in range(1, policy.max_attempts + 1):
        try:
            return action()
        except Exception as e:
            if not policy.retry_on(e):
                raise

            logger.warning("Attempt %d/%d for %s failed: %s", attempt, policy.max_attempts, description, e)
            if attempt == policy.max_attempts:
                logger.error("All %d attempts failed for %s", policy.max_attempts, description)
                raise

            logger.debug("Waiting %ss before retry...", policy.delay_seconds)
            sleep(policy.delay_seconds)

    # Unreachable: the loop either returns or raises
    msg = f"Retry loop exited without result for {description}"
    raise RuntimeError(msg)
