from datetime import date
from pathlib import Path

import pytest

from results.services.lottery_scraper import SALotteryScraper
from results.services.section_parser import SectionParser
from helpers import StubFetcher

FIXTURES_DIR = Path(__file__).parent / 'fixtures'

DRAW_DATE = date(2025, 11, 28)


@pytest.fixture
def results_page():
    return (FIXTURES_DIR / 'results_page.html').read_text(encoding='utf-8')


@pytest.fixture
def parser():
    return SectionParser(today_provider=lambda: DRAW_DATE)


@pytest.fixture
def make_scraper(parser):
    def factory(*responses, retries=3):
        fetcher = StubFetcher(*responses)
        return SALotteryScraper(fetcher=fetcher, parser=parser, retries=retries,
                                retry_delay=5, sleep=lambda seconds: None)
    return factory


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()
