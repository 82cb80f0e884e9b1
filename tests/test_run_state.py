"""
Tests for the per-game run state machine.
"""

from datetime import date, time, timedelta

from results.services.run_state import RunPhase, RunStateTracker
from helpers import sast

SCHEDULE = time(21, 30)


def evaluate(tracker, when, draw_day=True):
    return tracker.evaluate('powerball', when, SCHEDULE, draw_day)


class TestScheduleBoundaries:
    def test_before_schedule_time_is_waiting(self):
        assert evaluate(RunStateTracker(), sast(2025, 11, 28, 21, 29)) == RunPhase.WAITING

    def test_at_schedule_time_is_due(self):
        assert evaluate(RunStateTracker(), sast(2025, 11, 28, 21, 30)) == RunPhase.DUE

    def test_deadline_minute_is_still_due(self):
        assert evaluate(RunStateTracker(), sast(2025, 11, 28, 22, 30)) == RunPhase.DUE

    def test_past_deadline_is_abandoned(self):
        tracker = RunStateTracker()
        evaluate(tracker, sast(2025, 11, 28, 21, 30))
        tracker.record_attempt('powerball', sast(2025, 11, 28, 21, 30))

        assert evaluate(tracker, sast(2025, 11, 28, 22, 31)) == RunPhase.ABANDONED
        assert evaluate(tracker, sast(2025, 11, 28, 23, 59)) == RunPhase.ABANDONED

    def test_custom_retry_window(self):
        tracker = RunStateTracker(retry_window=timedelta(minutes=10))

        assert evaluate(tracker, sast(2025, 11, 28, 21, 41)) == RunPhase.ABANDONED

    def test_not_draw_day_clears_state(self):
        tracker = RunStateTracker()
        tracker.record_attempt('powerball', sast(2025, 11, 28, 21, 30))

        assert evaluate(tracker, sast(2025, 11, 29, 21, 35), draw_day=False) == RunPhase.NOT_DRAW_DAY
        assert tracker.get('powerball').next_retry_at is None


class TestBackoff:
    def test_attempt_throttles_until_backoff_elapses(self):
        tracker = RunStateTracker()
        evaluate(tracker, sast(2025, 11, 28, 21, 30))
        tracker.record_attempt('powerball', sast(2025, 11, 28, 21, 30))

        assert evaluate(tracker, sast(2025, 11, 28, 21, 31)) == RunPhase.BACKOFF
        assert evaluate(tracker, sast(2025, 11, 28, 21, 34)) == RunPhase.BACKOFF
        assert evaluate(tracker, sast(2025, 11, 28, 21, 35)) == RunPhase.DUE

    def test_attempt_from_previous_day_does_not_throttle(self):
        tracker = RunStateTracker()
        tracker.record_attempt('powerball', sast(2025, 11, 25, 22, 0))

        assert evaluate(tracker, sast(2025, 11, 28, 21, 30)) == RunPhase.DUE


class TestSatisfied:
    def test_success_satisfies_until_next_day(self):
        tracker = RunStateTracker()
        tracker.record_success('powerball', date(2025, 11, 28))

        assert evaluate(tracker, sast(2025, 11, 28, 21, 45)) == RunPhase.SATISFIED
        assert evaluate(tracker, sast(2025, 12, 2, 21, 30)) == RunPhase.DUE

    def test_storage_check_once_per_day(self):
        tracker = RunStateTracker()

        assert tracker.needs_storage_check('powerball', date(2025, 11, 28))
        tracker.mark_storage_checked('powerball', date(2025, 11, 28))
        assert not tracker.needs_storage_check('powerball', date(2025, 11, 28))
        assert tracker.needs_storage_check('powerball', date(2025, 12, 2))

    def test_snapshot(self):
        tracker = RunStateTracker()
        tracker.record_success('powerball', date(2025, 11, 28))

        assert tracker.snapshot()['powerball']['last_run_date'] == '2025-11-28'
