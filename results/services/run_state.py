"""
Per-game run state for the scrape scheduler.

Each game moves through these phases within one source-local day:

    NOT_DRAW_DAY  today is not a draw day for the game (state is cleared)
    WAITING       draw day, but the schedule time has not been reached
    DUE           schedule time reached, no success today, inside the window
    BACKOFF       DUE, but the last attempt was less than the backoff ago
    SATISFIED     today's result has been ingested
    ABANDONED     the retry window closed without a success

The state is volatile. The scheduler owns the tracker and re-derives
SATISFIED from storage after a restart.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Dict, Optional


class RunPhase(str, Enum):
    NOT_DRAW_DAY = 'not_draw_day'
    WAITING = 'waiting'
    DUE = 'due'
    BACKOFF = 'backoff'
    SATISFIED = 'satisfied'
    ABANDONED = 'abandoned'


@dataclass
class GameRunState:
    last_run_date: Optional[date] = None
    next_retry_at: Optional[datetime] = None
    retry_deadline: Optional[datetime] = None
    storage_checked_on: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            'last_run_date': self.last_run_date.isoformat() if self.last_run_date else None,
            'next_retry_at': self.next_retry_at.isoformat() if self.next_retry_at else None,
            'retry_deadline': self.retry_deadline.isoformat() if self.retry_deadline else None,
        }


class RunStateTracker:
    """
    In-memory run state keyed by game slug
    """

    def __init__(self, retry_window: timedelta = timedelta(minutes=60),
                 backoff: timedelta = timedelta(minutes=5)):
        self.retry_window = retry_window
        self.backoff = backoff
        self._states: Dict[str, GameRunState] = {}

    def get(self, slug: str) -> GameRunState:
        state = self._states.get(slug)
        if state is None:
            state = self._states[slug] = GameRunState()
        return state

    def reset(self, slug: str) -> None:
        self._states[slug] = GameRunState()

    def evaluate(self, slug: str, now: datetime, schedule_time: time, draw_day: bool) -> RunPhase:
        """
        Decide the phase of a game at ``now`` (an aware source-local datetime)
        """
        if not draw_day:
            self.reset(slug)
            return RunPhase.NOT_DRAW_DAY

        state = self.get(slug)
        today = now.date()

        if state.last_run_date == today:
            return RunPhase.SATISFIED

        scheduled_at = now.replace(
            hour=schedule_time.hour, minute=schedule_time.minute, second=0, microsecond=0
        )
        if now < scheduled_at:
            return RunPhase.WAITING

        deadline = scheduled_at + self.retry_window
        if state.retry_deadline != deadline:
            # First due evaluation of this draw day
            state.retry_deadline = deadline
            state.next_retry_at = None

        if now > deadline:
            return RunPhase.ABANDONED

        if state.next_retry_at is not None and now < state.next_retry_at:
            return RunPhase.BACKOFF

        return RunPhase.DUE

    def record_attempt(self, slug: str, now: datetime) -> None:
        self.get(slug).next_retry_at = now + self.backoff

    def record_success(self, slug: str, day: date) -> None:
        state = self.get(slug)
        state.last_run_date = day
        state.next_retry_at = None

    def needs_storage_check(self, slug: str, day: date) -> bool:
        return self.get(slug).storage_checked_on != day

    def mark_storage_checked(self, slug: str, day: date) -> None:
        self.get(slug).storage_checked_on = day

    def snapshot(self) -> Dict[str, dict]:
        return {slug: state.to_dict() for slug, state in self._states.items()}
