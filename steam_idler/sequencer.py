"""Turn-taking primitives that keep Steam logins one-at-a-time.

``LoginSequencer`` hands out the initial login turn strictly in account
order, ``RelogQueue`` does the same for accounts that lost their connection,
in the order they dropped.
"""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class LoginSequencer:
    """Owns the turn counter. Account ``i`` may log in once ``current == i``.

    A session calls :meth:`done` with its own index once it is logged in,
    which moves the counter on and wakes the next account. If that never
    happens the queue stalls; the stall is reported through ``stalled``
    and the log, but no account is skipped.
    """

    def __init__(self, stall_timeout: float = 0.0, total: Optional[int] = None):
        self.current = 0
        self.stall_timeout = stall_timeout
        # number of accounts in the queue, when known
        self.total = total
        self.stalled_at: Optional[int] = None
        self.stall_reason = ""
        self._waiters: Dict[int, asyncio.Event] = {}

    @property
    def stalled(self) -> bool:
        return self.stalled_at is not None

    @property
    def waiting(self) -> List[int]:
        return sorted(self._waiters)

    async def wait_for_turn(self, index: int) -> None:
        if index < self.current:
            raise ValueError(f"turn {index} has already passed (current turn is {self.current})")
        if index == self.current:
            return
        evt = self._waiters.setdefault(index, asyncio.Event())
        try:
            while not evt.is_set():
                try:
                    await asyncio.wait_for(evt.wait(), self.stall_timeout or None)
                except asyncio.TimeoutError:
                    if not evt.is_set():
                        self._report_timeout()
        finally:
            if self._waiters.get(index) is evt:
                del self._waiters[index]

    def done(self, index: int) -> bool:
        """Advance past ``index`` if it holds the turn. Returns False otherwise."""
        if index != self.current:
            return False
        self.current += 1
        if self.stalled_at is not None:
            logger.info("Login queue moving again (turn %d)", self.current)
        self.stalled_at = None
        self.stall_reason = ""
        evt = self._waiters.get(self.current)
        if evt is not None:
            evt.set()
        return True

    def stall(self, index: int, reason: str) -> None:
        self.stalled_at = index
        self.stall_reason = reason
        logger.error(
            "Login queue stalled at account #%d: %s. %d account(s) waiting behind it will not log in.",
            index, reason, self._behind(index),
        )

    def _behind(self, index: int) -> int:
        if self.total is None:
            return len(self._waiters)
        return max(0, self.total - index - 1)

    def _report_timeout(self) -> None:
        if self.stalled_at == self.current:
            return
        self.stalled_at = self.current
        self.stall_reason = f"no login finished within {self.stall_timeout:g}s"
        logger.warning(
            "Login queue stalled: account #%d has not finished logging in after %gs, %d account(s) waiting",
            self.current, self.stall_timeout, self._behind(self.current),
        )


class RelogQueue:
    """FIFO of disconnected account indices; only the head may relog."""

    def __init__(self):
        self._queue: deque[int] = deque()
        self._waiters: Dict[int, asyncio.Event] = {}

    def __len__(self) -> int:
        return len(self._queue)

    def __contains__(self, index: object) -> bool:
        return index in self._queue

    @property
    def waiting(self) -> List[int]:
        return list(self._queue)

    def enqueue(self, index: int) -> None:
        if index not in self._queue:
            self._queue.append(index)

    async def wait_for_turn(self, index: int) -> bool:
        """Wait until ``index`` heads the queue. False if it was released meanwhile."""
        self.enqueue(index)
        while index in self._queue and self._queue[0] != index:
            evt = self._waiters.setdefault(index, asyncio.Event())
            try:
                await evt.wait()
            finally:
                self._waiters.pop(index, None)
        return index in self._queue

    def release(self, index: int) -> None:
        if index not in self._queue:
            return
        was_head = self._queue[0] == index
        self._queue.remove(index)
        self._wake(index)
        if was_head and self._queue:
            self._wake(self._queue[0])

    def _wake(self, index: int) -> None:
        evt = self._waiters.get(index)
        if evt is not None:
            evt.set()
