"""Cooperative single-threaded timers on a virtual millisecond clock.

Nothing here sleeps. Callers advance time explicitly and due callbacks fire in
(due time, scheduling order). A cancelled handle never fires.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class TimerHandle:
    """A scheduled one-shot callback."""

    due_ms: int
    callback: Callable[[], None]
    owner: str = ""
    cancelled: bool = False
    fired: bool = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


@dataclass(order=True)
class _Entry:
    due_ms: int
    seq: int
    handle: TimerHandle = field(compare=False)


class TimerScheduler:
    """Min-heap of pending timers keyed by due time then insertion order."""

    def __init__(self) -> None:
        self.now_ms: int = 0
        self._heap: list[_Entry] = []
        self._seq: int = 0

    def call_later(self, delay_ms: int, callback: Callable[[], None], owner: str = "") -> TimerHandle:
        if delay_ms < 0:
            raise ValueError(f"negative timer delay: {delay_ms}")
        handle = TimerHandle(due_ms=self.now_ms + delay_ms, callback=callback, owner=owner)
        self._seq += 1
        heapq.heappush(self._heap, _Entry(handle.due_ms, self._seq, handle))
        return handle

    def cancel(self, handle: Optional[TimerHandle]) -> bool:
        if handle is None or not handle.active:
            return False
        handle.cancelled = True
        return True

    def cancel_owner(self, owner: str) -> int:
        """Cancel every live timer registered under ``owner``."""
        count = 0
        for entry in self._heap:
            if entry.handle.owner == owner and self.cancel(entry.handle):
                count += 1
        return count

    def cancel_all(self) -> int:
        count = sum(1 for entry in self._heap if self.cancel(entry.handle))
        self._heap.clear()
        return count

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._heap if entry.handle.active)

    def next_due(self) -> Optional[int]:
        self._drop_dead()
        return self._heap[0].due_ms if self._heap else None

    def step(self) -> bool:
        """Fire the earliest live timer. Returns False when nothing is pending."""
        self._drop_dead()
        if not self._heap:
            return False
        entry = heapq.heappop(self._heap)
        self.now_ms = max(self.now_ms, entry.due_ms)
        entry.handle.fired = True
        entry.handle.callback()
        return True

    def advance(self, delta_ms: int) -> None:
        """Move virtual time forward, firing everything that falls due."""
        target = self.now_ms + delta_ms
        while True:
            due = self.next_due()
            if due is None or due > target:
                break
            self.step()
        self.now_ms = target

    def run_until(self, predicate: Callable[[], bool], limit_ms: Optional[int] = None) -> bool:
        """Fire timers one by one until ``predicate`` holds.

        Returns False if the queue empties or ``limit_ms`` of virtual time
        passes first.
        """
        deadline = None if limit_ms is None else self.now_ms + limit_ms
        while not predicate():
            due = self.next_due()
            if due is None:
                return False
            if deadline is not None and due > deadline:
                self.now_ms = deadline
                return False
            self.step()
        return True

    def _drop_dead(self) -> None:
        while self._heap and not self._heap[0].handle.active:
            heapq.heappop(self._heap)
