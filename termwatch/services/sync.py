"""
The one place calendar outcomes are judged.

Record writes are the source of truth; the calendar mirror is advisory. A
failed or crashing calendar call is logged here and never reaches the caller.
There are no retries: a mirror that failed to update stays stale.
"""

import logging
from typing import Any, Awaitable, Callable, Optional

from termwatch.services.calendar_service import CalendarSyncResult

logger = logging.getLogger(__name__)


async def best_effort(
    what: str,
    call: Callable[..., Awaitable[CalendarSyncResult]],
    *args: Any,
) -> Optional[CalendarSyncResult]:
    """Run one calendar call; return its result, or None if it raised."""
    try:
        result = await call(*args)
    except Exception:
        logger.exception("Calendar sync crashed (%s)", what)
        return None
    if result.skipped:
        logger.debug("Calendar sync skipped (%s): %s", what, result.reason)
    elif not result.ok:
        logger.warning("Calendar sync failed (%s): %s", what, result.reason)
    return result
