"""Bounded store calls.

Every remote round-trip runs under ``asyncio.timeout``. The budget is the
configured store timeout, shortened by a caller-supplied deadline.
"""

import asyncio
from collections.abc import Awaitable
from datetime import datetime
from typing import TypeVar

T = TypeVar("T")


def time_budget(
    now: datetime, deadline: datetime | None, default_seconds: float
) -> float:
    """Seconds available for the next call.

    Args:
        now: Current time
        deadline: Optional absolute deadline from the caller
        default_seconds: Configured per-call timeout

    Returns:
        Timeout in seconds, 0 if the deadline already passed
    """
    if deadline is None:
        return default_seconds
    remaining = (deadline - now).total_seconds()
    return max(0.0, min(default_seconds, remaining))


async def bounded(awaitable: Awaitable[T], timeout: float) -> T:
    """Await with a timeout.

    Raises:
        TimeoutError: If the call does not finish within ``timeout`` seconds
    """
    async with asyncio.timeout(timeout):
        return await awaitable
