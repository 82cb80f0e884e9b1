"""
Scrape scheduler

A periodic tick decides, per enabled game, whether today's draw should be
looked for now. All games that are due share one fetch -> parse -> ingest
cycle, because every game lives on the same source page. Cycles are
serialized by a single-flight guard: a tick that finds a cycle running skips,
an on-demand caller either joins an identical on-demand cycle or fails fast.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from django.conf import settings
from django.db import close_old_connections

from results.games import GAME_CONFIGS, GameConfig, is_draw_day, parse_schedule_time
from results.services.cache_purge import schedule_daily_purge, schedule_purge
from results.services.ingestion import IngestionReport, process_scraped_results
from results.services.lottery_scraper import SALotteryScraper, ScraperBusyError
from results.services.result_store import DjangoResultStore
from results.services.run_state import RunPhase, RunStateTracker
from results.services.section_parser import ScrapedCandidate
from results.services.single_flight import SingleFlight
from results.utils.clock import source_now

logger = logging.getLogger(__name__)


@dataclass
class ScrapeRunResult:
    candidates: List[ScrapedCandidate]
    report: IngestionReport
    filtered_out: int = 0

    def to_response(self) -> dict:
        return {
            'success': True,
            'message': f'Scraped {len(self.candidates)} results, added {self.report.added_count} new results',
            'scraped': len(self.candidates),
            'added': self.report.added_count,
            'results': [
                {
                    'game': c.game_name,
                    'numbers': ', '.join(str(n) for n in c.winning_numbers),
                    'bonus': c.bonus_number,
                    'date': c.draw_date.isoformat(),
                    'jackpot': c.next_jackpot,
                }
                for c in self.candidates
            ],
            'addedResults': self.report.added_results,
            'skippedResults': self.report.skipped_results,
        }


@dataclass
class TickOutcome:
    checked_at: datetime
    phases: Dict[str, str] = field(default_factory=dict)
    due: List[str] = field(default_factory=list)
    satisfied: List[str] = field(default_factory=list)
    ran: bool = False
    skipped_busy: bool = False
    error: Optional[str] = None
    report: Optional[IngestionReport] = None
    day_rolled_over: bool = False

    def to_dict(self) -> dict:
        return {
            'checked_at': self.checked_at.isoformat(),
            'day_rolled_over': self.day_rolled_over,
            'phases': self.phases,
            'due': self.due,
            'satisfied': self.satisfied,
            'ran': self.ran,
            'skipped_busy': self.skipped_busy,
            'error': self.error,
            'added': self.report.added_count if self.report else 0,
        }


class ScraperScheduler:
    SCHEDULED_KEY = 'scrape:scheduled'
    ON_DEMAND_KEY = 'scrape:on-demand'
    CHECK_KEY = 'scrape:check'

    def __init__(self, scraper: Optional[SALotteryScraper] = None, store: Optional[DjangoResultStore] = None,
                 tracker: Optional[RunStateTracker] = None, guard: Optional[SingleFlight] = None,
                 clock: Callable[[], datetime] = source_now,
                 purge: Callable[[List[dict]], object] = schedule_purge,
                 daily_purge: Callable[[], object] = schedule_daily_purge,
                 configs: Sequence[GameConfig] = GAME_CONFIGS,
                 on_demand_wait: Optional[float] = None):
        self.scraper = scraper or SALotteryScraper()
        self.store = store or DjangoResultStore()
        self.tracker = tracker or RunStateTracker()
        self.guard = guard or SingleFlight()
        self.clock = clock
        self.purge = purge
        self.daily_purge = daily_purge
        self.configs = list(configs)
        self.on_demand_wait = on_demand_wait
        self._current_day: Optional[date] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @classmethod
    def from_settings(cls) -> 'ScraperScheduler':
        config = settings.LOTTERY_SCRAPER
        tracker = RunStateTracker(
            retry_window=timedelta(minutes=config['RETRY_WINDOW_MINUTES']),
            backoff=timedelta(minutes=config['RETRY_BACKOFF_MINUTES']),
        )
        return cls(tracker=tracker, on_demand_wait=config['ON_DEMAND_WAIT_SECONDS'])

    @property
    def is_running(self) -> bool:
        return self.guard.is_running

    # ------------------------------------------------------------------
    # Automatic path
    # ------------------------------------------------------------------

    def tick(self, now: Optional[datetime] = None) -> TickOutcome:
        """
        Evaluate every enabled game and run one shared cycle for the due ones.
        Scrape errors are logged and reported in the outcome, never raised.
        """
        now = now or self.clock()
        today = now.date()
        outcome = TickOutcome(checked_at=now)
        outcome.day_rolled_over = self._check_day_rollover(today)

        settings_by_slug = {s.game_slug: s for s in self.store.get_scraper_settings()}
        games_by_slug = {g.slug: g for g in self.store.get_games()}
        enabled_configs = []
        due_configs = []

        for config in self.configs:
            setting = settings_by_slug.get(config.slug)
            if setting is None or not setting.is_enabled:
                continue
            enabled_configs.append(config)

            try:
                schedule_time = parse_schedule_time(setting.schedule_time or config.default_schedule_time)
            except ValueError as e:
                logger.warning(f"{config.display_name}: {e}, skipping")
                continue

            game = games_by_slug.get(config.slug)
            draw_days = game.draw_days if game is not None and game.draw_days else config.draw_days

            phase = self.tracker.evaluate(config.slug, now, schedule_time, is_draw_day(draw_days, today))
            if phase in (RunPhase.DUE, RunPhase.BACKOFF):
                phase = self._check_storage(config, today, phase)

            outcome.phases[config.slug] = phase.value
            if phase == RunPhase.DUE:
                due_configs.append(config)

        outcome.due = [config.slug for config in due_configs]
        if not due_configs:
            return outcome

        logger.info(f"Scheduled scrape due for: {', '.join(outcome.due)}")

        try:
            result = self.guard.run(
                self.SCHEDULED_KEY,
                lambda: self._scheduled_cycle(enabled_configs, due_configs, now),
                join=False,
            )
        except ScraperBusyError:
            logger.info("Scrape already in progress, skipping this tick")
            outcome.skipped_busy = True
            return outcome
        except Exception as e:
            logger.error(f"Scheduled scrape failed: {e}", exc_info=True)
            outcome.ran = True
            outcome.error = str(e)
            return outcome

        outcome.ran = True
        outcome.report = result.report

        found_today = {c.game_slug for c in result.candidates if c.draw_date == today}
        for config in due_configs:
            if config.slug in found_today:
                self.tracker.record_success(config.slug, today)
                outcome.satisfied.append(config.slug)
            else:
                logger.info(f"{config.display_name}: today's draw not published yet, will retry")

        return outcome

    def _check_day_rollover(self, today: date) -> bool:
        # The first tick only records the day
        previous, self._current_day = self._current_day, today
        if previous is None or previous == today:
            return False

        logger.info(f"Source date rolled over to {today}, purging daily pages")
        try:
            self.daily_purge()
        except Exception as e:
            logger.error(f"Daily cache purge failed: {e}", exc_info=True)
        return True

    def _check_storage(self, config: GameConfig, today: date, phase: RunPhase) -> RunPhase:
        # Once per day, re-derive success from storage
        if not self.tracker.needs_storage_check(config.slug, today):
            return phase
        self.tracker.mark_storage_checked(config.slug, today)
        if self.store.latest_draw_date(config.slug) == today:
            logger.info(f"{config.display_name}: today's result already stored")
            self.tracker.record_success(config.slug, today)
            return RunPhase.SATISFIED
        return phase

    def _scheduled_cycle(self, enabled_configs, due_configs, now) -> ScrapeRunResult:
        for config in due_configs:
            self.tracker.record_attempt(config.slug, now)
        return self._cycle(enabled_configs, now)

    # ------------------------------------------------------------------
    # On-demand path
    # ------------------------------------------------------------------

    def run_now(self) -> ScrapeRunResult:
        """
        Scrape and ingest every game now

        Raises:
            LotteryScraperError: terminal scrape failure, or busy
        """
        now = self.clock()
        return self.guard.run(
            self.ON_DEMAND_KEY,
            lambda: self._cycle(self.configs, now),
            join=True,
            timeout=self.on_demand_wait,
        )

    def run_for_range(self, start_date: date, end_date: date,
                      game_slugs: Optional[Iterable[str]] = None) -> ScrapeRunResult:
        """
        Scrape now, keeping only draws dated within [start_date, end_date]
        for the requested games
        """
        slugs = set(game_slugs) if game_slugs else None
        configs = [c for c in self.configs if slugs is None or c.slug in slugs]
        key = f"{self.ON_DEMAND_KEY}:{start_date}:{end_date}:{','.join(sorted(c.slug for c in configs))}"
        now = self.clock()

        return self.guard.run(
            key,
            lambda: self._cycle(configs, now, keep=lambda c: start_date <= c.draw_date <= end_date),
            join=True,
            timeout=self.on_demand_wait,
        )

    def check_source(self) -> dict:
        """
        One fetch + parse attempt, serialized with scrape cycles

        Raises:
            ScraperBusyError: If a scrape is in flight
        """
        return self.guard.run(self.CHECK_KEY, self.scraper.test_scraper, join=False)

    def _cycle(self, configs: Sequence[GameConfig], now: datetime,
               keep: Optional[Callable[[ScrapedCandidate], bool]] = None) -> ScrapeRunResult:
        candidates = self.scraper.scrape_lottery_results(configs)
        selected = [c for c in candidates if keep is None or keep(c)]

        report = process_scraped_results(selected, self.store)
        self.store.update_scraper_last_run(now, [config.slug for config in configs])

        if report.added_count:
            try:
                self.purge(report.added_results)
            except Exception as e:
                logger.error(f"Cache purge failed: {e}", exc_info=True)

        logger.info(f"Scrape complete: scraped {len(selected)}, added {report.added_count}")
        return ScrapeRunResult(candidates=selected, report=report, filtered_out=len(candidates) - len(selected))

    # ------------------------------------------------------------------
    # Ticker
    # ------------------------------------------------------------------

    def status(self) -> dict:
        return {
            'is_running': self.is_running,
            'current_run': self.guard.current_key,
            'ticker_alive': bool(self._thread and self._thread.is_alive()),
            'games': self.tracker.snapshot(),
        }

    def start(self, interval: Optional[int] = None) -> None:
        if self._thread and self._thread.is_alive():
            return
        interval = interval or settings.LOTTERY_SCRAPER['TICK_INTERVAL']
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run_forever, args=(interval,), name='scraper-scheduler', daemon=True
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout)

    def run_forever(self, interval: int) -> None:
        logger.info(f"Scraper scheduler started (tick every {interval}s)")
        while True:
            close_old_connections()
            try:
                self.tick()
            except Exception as e:
                logger.error(f"Error in scheduler tick: {e}", exc_info=True)
            finally:
                close_old_connections()
            if self._stop_event.wait(interval):
                break
        logger.info("Scraper scheduler stopped")
