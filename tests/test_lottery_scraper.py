"""
Tests for the fetch + parse retry loop and the request identity.
"""

from unittest.mock import MagicMock

import pytest
import requests

from results.services.fetcher import ACCEPT_LANGUAGES, USER_AGENTS, SourceFetcher
from results.services.lottery_scraper import (
    NoSectionsFound,
    SALotteryScraper,
    TransportFailure,
)
from helpers import StubFetcher

EMPTY_PAGE = '<html><body><h1>Results coming soon</h1></body></html>'


class TestRetryLoop:
    def test_first_attempt_success(self, make_scraper, results_page):
        scraper = make_scraper(results_page)

        candidates = scraper.scrape_lottery_results()

        assert len(candidates) == 2
        assert scraper.fetcher.calls == 1

    def test_transport_error_then_success(self, make_scraper, results_page):
        scraper = make_scraper(requests.ConnectionError('reset'), results_page)

        assert len(scraper.scrape_lottery_results()) == 2
        assert scraper.fetcher.calls == 2

    def test_empty_page_is_retried(self, make_scraper, results_page):
        scraper = make_scraper(EMPTY_PAGE, EMPTY_PAGE, results_page)

        assert len(scraper.scrape_lottery_results()) == 2
        assert scraper.fetcher.calls == 3

    def test_transport_failure_after_all_attempts(self, make_scraper):
        scraper = make_scraper(requests.Timeout('slow'))

        with pytest.raises(TransportFailure, match='slow'):
            scraper.scrape_lottery_results()
        assert scraper.fetcher.calls == 3

    def test_last_error_is_raised(self, make_scraper):
        scraper = make_scraper(requests.ConnectionError('down'), requests.ConnectionError('down'), EMPTY_PAGE)

        with pytest.raises(NoSectionsFound):
            scraper.scrape_lottery_results()

    def test_sleeps_between_attempts_only(self, parser):
        sleeps = []
        scraper = SALotteryScraper(fetcher=StubFetcher(EMPTY_PAGE), parser=parser,
                                   retries=3, retry_delay=5, sleep=sleeps.append)

        with pytest.raises(NoSectionsFound):
            scraper.scrape_lottery_results()

        assert sleeps == [5, 5]

    def test_retries_default_from_settings(self, settings, parser):
        settings.LOTTERY_SCRAPER = {**settings.LOTTERY_SCRAPER, 'FETCH_RETRIES': 2, 'FETCH_RETRY_DELAY': 0}
        scraper = SALotteryScraper(fetcher=StubFetcher(EMPTY_PAGE), parser=parser, sleep=lambda s: None)

        with pytest.raises(NoSectionsFound):
            scraper.scrape_lottery_results()
        assert scraper.fetcher.calls == 2


class TestSourceCheck:
    def test_source_check_success(self, make_scraper, results_page):
        result = make_scraper(results_page).test_scraper()

        assert result == {
            'success': True,
            'message': 'Successfully scraped 2 lottery results',
            'count': 2,
        }

    def test_source_check_makes_one_attempt_and_reports_failure(self, make_scraper):
        scraper = make_scraper(requests.ConnectionError('refused'))

        result = scraper.test_scraper()

        assert result['success'] is False
        assert result['count'] == 0
        assert 'refused' in result['message']
        assert scraper.fetcher.calls == 1
        assert scraper.retries == 3


class TestSourceFetcher:
    def test_fetch_uses_pooled_identity_and_timeout(self):
        session = MagicMock()
        session.get.return_value.text = '<html></html>'
        fetcher = SourceFetcher(url='https://example.test/', timeout=7, session=session)

        assert fetcher.fetch() == '<html></html>'

        args, kwargs = session.get.call_args
        assert args == ('https://example.test/',)
        assert kwargs['timeout'] == 7
        assert kwargs['headers']['User-Agent'] in USER_AGENTS
        assert kwargs['headers']['Accept-Language'] in ACCEPT_LANGUAGES
        session.get.return_value.raise_for_status.assert_called_once()

    def test_http_error_propagates(self):
        session = MagicMock()
        session.get.return_value.raise_for_status.side_effect = requests.HTTPError('503 Server Error')
        fetcher = SourceFetcher(url='https://example.test/', session=session)

        with pytest.raises(requests.HTTPError):
            fetcher.fetch()
