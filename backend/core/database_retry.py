# backend/core/database_retry.py

import asyncio
import logging
from typing import Awaitable, Callable, Set, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Database error codes that indicate retry-able conditions
RETRY_ERROR_CODES: Set[str] = {
    # PostgreSQL
    "40001",  # serialization_failure
    "40P01",  # deadlock_detected
    "55P03",  # lock_not_available
    # MySQL
    "1205",  # Lock wait timeout exceeded
    "1213",  # Deadlock found when trying to get lock
    # SQLite
    "database is locked",
    "database table is locked",
}


def is_retryable_error(error: Exception) -> bool:
    """
    Check if a database error is retryable

    Args:
        error: The exception to check

    Returns:
        True if the error indicates a transient condition that may succeed on retry
    """
    if isinstance(error, (OperationalError, DBAPIError)):
        error_str = str(error).lower()
        if any(code in error_str for code in ["deadlock", "serialization", "could not serialize"]):
            return True

        orig = getattr(error, "orig", None)
        pgcode = getattr(orig, "pgcode", None)
        if pgcode:
            return pgcode in RETRY_ERROR_CODES
        if orig is not None and getattr(orig, "args", None):
            error_code = str(orig.args[0])
            return any(code in error_code for code in RETRY_ERROR_CODES)

    return False


async def retry_on_serialization_failure(
    func: Callable[..., Awaitable[T]],
    *args,
    max_retries: int = 1,
    delay: float = 0.05,
    **kwargs,
) -> T:
    """
    Run ``func`` and retry it when the database aborts the transaction with a
    serialization failure or deadlock. ``func`` must roll back its own session
    before re-raising.
    """
    for attempt in range(max_retries + 1):
        try:
            return await func(*args, **kwargs)
        except (OperationalError, DBAPIError) as e:
            if not is_retryable_error(e) or attempt == max_retries:
                raise
            logger.warning(
                f"Serialization failure on attempt {attempt + 1}/{max_retries + 1}, "
                f"retrying in {delay:.2f}s: {e}"
            )
            await asyncio.sleep(delay)
    raise RuntimeError("unreachable")
