"""
CollectionScheduler: refresh timing and the cycle budget of the persistent loop.
"""
from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class CollectionScheduler:
    """Track the time left before the next collection and the cycles left to run.

    ``remaining`` drops by one for every completed refresh interval, whether
    or not commands arrived during it, so a session lasts at most
    ``idle_count * refresh`` seconds.
    """

    def __init__(self, collect: Callable[[], None], refresh: float, idle_count: int) -> None:
        self.collect = collect
        self.refresh = refresh
        self.remaining = idle_count
        self.delay: float = refresh
        self.cycles = 0

    @property
    def timeout(self) -> float:
        return max(self.delay, 0.0)

    @property
    def exhausted(self) -> bool:
        return self.remaining <= 0

    def tick(self, elapsed: float) -> bool:
        """Account for ``elapsed`` seconds; collect when the interval has run out."""
        self.delay -= elapsed
        if self.delay > 0:
            return False
        self.cycles += 1
        logger.debug(f"Refresh interval expired, collecting (cycle {self.cycles}, {self.remaining - 1} left)")
        try:
            self.collect()
        except Exception:
            logger.exception("Collection failed, serving previous data")
        self.delay = self.refresh
        self.remaining -= 1
        return True
