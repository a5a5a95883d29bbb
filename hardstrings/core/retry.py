"""
Retry policy for suspendable external calls.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


@dataclass(frozen=True)
class RetryPolicy:
    """Call an async function up to `max_attempts` times.

    An exception waits `delay` seconds before the next attempt and is
    re-raised on the last one. An empty result is retried immediately;
    when every attempt comes back empty the last (empty) result is returned.
    """
    max_attempts: int = 10
    delay: float = 1.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay < 0:
            raise ValueError("delay must not be negative")

    async def run(
        self,
        func: Callable[..., Awaitable[T]],
        *args,
        is_empty: Callable[[Any], bool] = _is_empty,
        **kwargs,
    ) -> Optional[T]:
        result: Optional[T] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                if attempt == self.max_attempts:
                    raise
                logger.debug(f"Attempt {attempt}/{self.max_attempts} failed: {e}")
                if self.delay:
                    await asyncio.sleep(self.delay)
                continue
            if not is_empty(result):
                return result
            logger.debug(f"Attempt {attempt}/{self.max_attempts} returned nothing")
        return result
