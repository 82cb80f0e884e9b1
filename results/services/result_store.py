"""
Storage collaborator used by the ingestion core, backed by the Django ORM
"""

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from results.games import GAME_CONFIGS, GameConfig
from results.models import LotteryGame, LotteryResult, ScraperSetting
from results.services.section_parser import ScrapedCandidate

logger = logging.getLogger(__name__)


class DjangoResultStore:
    """
    Results, games and scraper settings persisted through Django models
    """

    def get_results_by_game(self, slug: str) -> List[LotteryResult]:
        """All stored results for a game, most recent draw first"""
        return list(
            LotteryResult.objects.filter(game_slug=slug).order_by('-draw_date', '-created_at')
        )

    def latest_draw_date(self, slug: str) -> Optional[date]:
        latest = (
            LotteryResult.objects.filter(game_slug=slug)
            .order_by('-draw_date')
            .values_list('draw_date', flat=True)
            .first()
        )
        return latest

    def create_result(self, candidate: ScrapedCandidate) -> LotteryResult:
        # The source only publishes the estimate for the next draw; it is
        # stored as this draw's jackpot too.
        return LotteryResult.objects.create(
            game_slug=candidate.game_slug,
            game_name=candidate.game_name,
            winning_numbers=list(candidate.winning_numbers),
            bonus_number=candidate.bonus_number,
            draw_date=candidate.draw_date,
            jackpot_amount=candidate.next_jackpot,
            next_jackpot=candidate.next_jackpot,
        )

    def get_games(self) -> List[LotteryGame]:
        return list(LotteryGame.objects.all())

    def get_scraper_settings(self) -> List[ScraperSetting]:
        return list(ScraperSetting.objects.all())

    def upsert_scraper_setting(self, game_slug: str, is_enabled: bool = True,
                               schedule_time: Optional[str] = None) -> ScraperSetting:
        setting, created = ScraperSetting.objects.update_or_create(
            game_slug=game_slug,
            defaults={
                'is_enabled': is_enabled,
                'schedule_time': schedule_time,
            }
        )
        logger.info(f"{'Created' if created else 'Updated'} scraper setting: {setting}")
        return setting

    def update_scraper_last_run(self, timestamp: datetime, game_slugs: Optional[Iterable[str]] = None) -> int:
        queryset = ScraperSetting.objects.all()
        if game_slugs is not None:
            queryset = queryset.filter(game_slug__in=list(game_slugs))
        return queryset.update(last_scraped_at=timestamp)

    def initialize_default_data(self, configs: Iterable[GameConfig] = GAME_CONFIGS) -> Dict[str, int]:
        """
        Create the default games and scraper settings that do not exist yet.
        Existing rows are left untouched.
        """
        games_created = 0
        settings_created = 0

        for config in configs:
            _, created = LotteryGame.objects.get_or_create(
                slug=config.slug,
                defaults={
                    'name': config.display_name,
                    'description': config.description,
                    'number_count': config.expected_number_count,
                    'max_number': config.max_number,
                    'has_bonus_ball': config.has_bonus_number,
                    'bonus_max_number': config.bonus_max_number,
                    'draw_days': list(config.draw_days),
                    'draw_time': config.draw_time,
                    'is_active': True,
                }
            )
            games_created += int(created)

            _, created = ScraperSetting.objects.get_or_create(
                game_slug=config.slug,
                defaults={
                    'is_enabled': True,
                    'schedule_time': config.default_schedule_time,
                }
            )
            settings_created += int(created)

        if games_created or settings_created:
            logger.info(f"Initialized default data: {games_created} games, {settings_created} scraper settings")

        return {'games': games_created, 'settings': settings_created}
