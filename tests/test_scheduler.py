"""
Tests for the cooperative timer scheduler.

Tests:
- Firing order by due time, then scheduling order
- Cancellation by handle, owner and wholesale
- Virtual time bookkeeping
"""

import pytest

from arena_sim.core.scheduler import TimerScheduler


class TestOrdering:
    """Timers fire in (due, insertion) order."""

    def test_due_time_then_insertion(self):
        """Earlier due first; ties keep insertion order."""
        scheduler = TimerScheduler()
        fired = []
        scheduler.call_later(200, lambda: fired.append("late"))
        scheduler.call_later(100, lambda: fired.append("first"))
        scheduler.call_later(100, lambda: fired.append("second"))

        scheduler.advance(200)

        assert fired == ["first", "second", "late"]
        assert scheduler.now_ms == 200

    def test_nothing_fires_early(self):
        """A timer is not due one millisecond before its instant."""
        scheduler = TimerScheduler()
        fired = []
        scheduler.call_later(700, lambda: fired.append(True))

        scheduler.advance(699)
        assert fired == []
        scheduler.advance(1)
        assert fired == [True]

    def test_callback_can_schedule_more(self):
        """Timers added from a callback join the same advance."""
        scheduler = TimerScheduler()
        fired = []

        def chain():
            fired.append(scheduler.now_ms)
            if len(fired) < 3:
                scheduler.call_later(100, chain)

        scheduler.call_later(100, chain)
        scheduler.advance(1000)

        assert fired == [100, 200, 300]

    def test_negative_delay_rejected(self):
        """Negative delays are a programming error."""
        with pytest.raises(ValueError):
            TimerScheduler().call_later(-1, lambda: None)


class TestCancellation:
    """A cancelled handle never fires."""

    def test_cancel_handle(self):
        """Cancelling returns True once, then False."""
        scheduler = TimerScheduler()
        fired = []
        handle = scheduler.call_later(100, lambda: fired.append(True))

        assert scheduler.cancel(handle) is True
        assert scheduler.cancel(handle) is False
        scheduler.advance(500)

        assert fired == []
        assert not handle.active

    def test_cancel_owner(self):
        """Only the named owner's timers are dropped."""
        scheduler = TimerScheduler()
        fired = []
        scheduler.call_later(100, lambda: fired.append("a"), owner="countdown")
        scheduler.call_later(100, lambda: fired.append("b"), owner="countdown")
        scheduler.call_later(100, lambda: fired.append("c"), owner="playback")

        assert scheduler.cancel_owner("countdown") == 2
        scheduler.advance(100)

        assert fired == ["c"]

    def test_cancel_all(self):
        """Teardown leaves nothing pending."""
        scheduler = TimerScheduler()
        for delay in (10, 20, 30):
            scheduler.call_later(delay, lambda: None)

        assert scheduler.pending == 3
        assert scheduler.cancel_all() == 3
        assert scheduler.pending == 0
        assert scheduler.next_due() is None


class TestRunUntil:
    """Event-by-event advancing."""

    def test_stops_when_predicate_holds(self):
        """Stops right after the timer that satisfied the predicate."""
        scheduler = TimerScheduler()
        fired = []
        for delay in (100, 200, 300):
            scheduler.call_later(delay, lambda d=delay: fired.append(d))

        assert scheduler.run_until(lambda: 200 in fired) is True
        assert fired == [100, 200]
        assert scheduler.now_ms == 200

    def test_returns_false_when_exhausted(self):
        """An empty queue cannot satisfy the predicate."""
        scheduler = TimerScheduler()
        scheduler.call_later(10, lambda: None)

        assert scheduler.run_until(lambda: False) is False

    def test_limit(self):
        """Virtual time stops at the limit."""
        scheduler = TimerScheduler()
        scheduler.call_later(5000, lambda: None)

        assert scheduler.run_until(lambda: False, limit_ms=1000) is False
        assert scheduler.now_ms == 1000
        assert scheduler.pending == 1
