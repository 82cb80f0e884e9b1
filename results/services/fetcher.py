"""
Outbound fetch of the lottery results source page.

One call to ``SourceFetcher.fetch`` is one attempt. Each attempt picks a
fresh request identity (user agent and accept-language) from a fixed pool.
The retry loop lives in ``SALotteryScraper`` because an empty parse retries
the same way a network failure does.
"""

import logging
import random
from typing import Dict, Optional

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.1 Safari/605.1.15",
]

ACCEPT_LANGUAGES = [
    "en-US,en;q=0.5",
    "en-ZA,en;q=0.9",
    "en-GB,en;q=0.8",
    "en-ZA,en-GB;q=0.9,en;q=0.7",
]


class SourceFetcher:
    """
    Fetches the raw markup of the results page
    """

    def __init__(self, url: Optional[str] = None, timeout: Optional[int] = None,
                 session: Optional[requests.Session] = None):
        config = settings.LOTTERY_SCRAPER
        self.url = url or config['SOURCE_URL']
        self.timeout = timeout if timeout is not None else config['REQUEST_TIMEOUT']
        self.session = session or requests.Session()

    def build_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": random.choice(USER_AGENTS),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": random.choice(ACCEPT_LANGUAGES),
            "Accept-Encoding": "gzip, deflate",
            "DNT": "1",
            "Connection": "keep-alive",
            "Upgrade-Insecure-Requests": "1",
        }

    def fetch(self) -> str:
        """
        Perform one GET of the source page

        Returns:
            Page markup as text

        Raises:
            requests.RequestException: on any transport or HTTP status error
        """
        logger.info(f"Fetching lottery results from: {self.url}")
        response = self.session.get(self.url, headers=self.build_headers(), timeout=self.timeout)
        response.raise_for_status()
        return response.text
