"""
Fixture page -> parser -> ingestion, twice against an empty store.
"""

import pytest

from results.models import LotteryResult
from results.services.ingestion import process_scraped_results

pytestmark = pytest.mark.django_db


def test_second_pass_adds_nothing(make_scraper, results_page):
    scraper = make_scraper(results_page)
    LotteryResult.objects.all().delete()

    first = process_scraped_results(scraper.scrape_lottery_results())
    second = process_scraped_results(scraper.scrape_lottery_results())

    assert first.added_count == 2
    assert second.added_count == 0
    assert sorted(r['game_slug'] for r in second.skipped_results) == ['daily-lotto', 'powerball']
    assert sorted(r['date'] for r in second.skipped_results) == ['2025-11-28', '2025-11-28']
    assert LotteryResult.objects.count() == 2

    powerball = LotteryResult.objects.get(game_slug='powerball')
    assert 1 <= powerball.bonus_number <= 20
    assert all(1 <= n <= 50 for n in powerball.winning_numbers)
    daily = LotteryResult.objects.get(game_slug='daily-lotto')
    assert daily.bonus_number is None
    assert all(1 <= n <= 36 for n in daily.winning_numbers)
