"""
South African Lottery Web Scraper Service

Fetches the shared results page and extracts the latest draw of every
configured game in one pass. A fetch that fails at the transport level and
a fetch whose page yields no game sections are retried by the same bounded
loop.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Sequence

import requests
from django.conf import settings

from results.games import GAME_CONFIGS, GameConfig
from results.services.fetcher import SourceFetcher
from results.services.section_parser import ScrapedCandidate, SectionParser

logger = logging.getLogger(__name__)


class LotteryScraperError(Exception):
    """Base exception for lottery scraping errors"""
    pass


class TransportFailure(LotteryScraperError):
    """The source page could not be fetched"""
    pass


class NoSectionsFound(LotteryScraperError):
    """The page was fetched but no game section could be parsed"""
    pass


class ScraperBusyError(LotteryScraperError):
    """Another scrape cycle is already running"""
    pass


class SALotteryScraper:
    """
    Scraper for the South African lottery results page
    """

    def __init__(self, fetcher: Optional[SourceFetcher] = None, parser: Optional[SectionParser] = None,
                 retries: Optional[int] = None, retry_delay: Optional[float] = None,
                 sleep: Callable[[float], None] = time.sleep):
        """
        Initialize scraper

        Args:
            fetcher: Fetcher for the source page
            parser: Section parser applied to the fetched markup
            retries: Maximum number of attempts
            retry_delay: Seconds to wait between attempts
            sleep: Sleep function (replaced in tests)
        """
        config = settings.LOTTERY_SCRAPER
        self.fetcher = fetcher or SourceFetcher()
        self.parser = parser or SectionParser()
        self.retries = max(1, retries if retries is not None else config['FETCH_RETRIES'])
        self.retry_delay = retry_delay if retry_delay is not None else config['FETCH_RETRY_DELAY']
        self.sleep = sleep

    def scrape_lottery_results(self, configs: Sequence[GameConfig] = GAME_CONFIGS) -> List[ScrapedCandidate]:
        """
        Main method to scrape lottery results

        Args:
            configs: Games to extract from the page

        Returns:
            One ScrapedCandidate per game found on the page (at least one)

        Raises:
            TransportFailure: If the last attempt failed to fetch the page
            NoSectionsFound: If the last attempt parsed zero game sections
        """
        last_error: Optional[LotteryScraperError] = None

        for attempt in range(1, self.retries + 1):
            try:
                markup = self.fetcher.fetch()
                candidates = self.parser.parse(markup, configs)

                if candidates:
                    logger.info(f"Successfully scraped {len(candidates)} results on attempt {attempt}")
                    return candidates

                last_error = NoSectionsFound(
                    "No lottery results found on the source page. The results may not be published yet."
                )
                logger.warning(f"No results found on attempt {attempt} of {self.retries}")

            except requests.RequestException as e:
                last_error = TransportFailure(f"Failed to fetch results page: {str(e)}")
                logger.error(f"Scraping attempt {attempt} of {self.retries} failed: {e}")

            if attempt < self.retries:
                logger.info(f"Retrying in {self.retry_delay} seconds (attempt {attempt + 1} of {self.retries})...")
                self.sleep(self.retry_delay)

        raise last_error

    def test_scraper(self) -> Dict:
        """
        Single attempt without delay, reporting instead of raising

        Returns:
            Dictionary with success status, message and result count
        """
        single = SALotteryScraper(fetcher=self.fetcher, parser=self.parser, retries=1, retry_delay=0,
                                 sleep=self.sleep)
        try:
            results = single.scrape_lottery_results()
            return {
                'success': True,
                'message': f'Successfully scraped {len(results)} lottery results',
                'count': len(results),
            }
        except LotteryScraperError as e:
            return {
                'success': False,
                'message': str(e),
                'count': 0,
            }
