"""
Section Parser

Turns the markup of the results page into one ScrapedCandidate per game.
Each game's block is located by a chain of strategies (structural heading
first, plain-text search second) and the located text is classified line by
line. A game whose block does not yield exactly the expected count of
winning numbers is simply left out of this pass.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup, Comment, Tag
from django.conf import settings

from results.games import GAME_CONFIGS, GameConfig
from results.utils.clock import source_today

logger = logging.getLogger(__name__)


HEADING_TAGS = ['h1', 'h2', 'h3', 'h4']

NUMBER_RE = re.compile(r'^\d{2}$')
BONUS_RE = re.compile(r'^\\?\+\s*(\d{1,2})$')
DATE_RE = re.compile(r'^(\d{4}-\d{2}-\d{2})')
JACKPOT_RE = re.compile(
    r'(?:estimated\s+jackpot[^:\n]*|next\s+draw)\s*:\s*(R\s?\d[\d,\s]*(?:\.\d+)?)',
    re.IGNORECASE,
)


@dataclass
class ScrapedCandidate:
    """A parsed draw that has not been persisted yet"""
    game_slug: str
    game_name: str
    winning_numbers: List[int]
    bonus_number: Optional[int]
    draw_date: date
    next_jackpot: Optional[str] = None


@dataclass
class SectionReading:
    winning_numbers: List[int] = field(default_factory=list)
    bonus_number: Optional[int] = None
    draw_date: Optional[date] = None
    next_jackpot: Optional[str] = None


class ParsedDocument:
    """Markup parsed once and shared by every strategy and game"""

    def __init__(self, markup: str, configs: Sequence[GameConfig]):
        self.soup = BeautifulSoup(markup or '', 'lxml')
        self.configs = list(configs)
        self._text = None

    @property
    def text(self) -> str:
        if self._text is None:
            self._text = self.soup.get_text('\n')
        return self._text


class SectionStrategy:
    """Locates the text block of one game, or returns None"""

    name = 'base'

    def locate(self, document: ParsedDocument, config: GameConfig) -> Optional[str]:
        raise NotImplementedError


class HeadingSectionStrategy(SectionStrategy):
    """
    Find a heading whose text is '<game> results' and read the content
    around it: the parent's text when the parent is a small block holding
    only this heading plus some content, otherwise up to ``sibling_window``
    following nodes of the heading, or of its wrapper when the heading sits
    alone in one.
    """

    name = 'heading'

    def __init__(self, sibling_window: int = 15, short_parent_chars: int = 600):
        self.sibling_window = sibling_window
        self.short_parent_chars = short_parent_chars

    def locate(self, document, config):
        for heading in document.soup.find_all(HEADING_TAGS):
            heading_text = ' '.join(heading.get_text(' ', strip=True).split())
            if not config.section_matcher.match(heading_text):
                continue

            parent = heading.parent
            if parent is not None and parent.name in ('body', 'html', '[document]'):
                parent = None

            if parent is not None:
                parent_text = parent.get_text('\n', strip=True)
                if (len(parent_text) <= self.short_parent_chars
                        and len(parent.find_all(HEADING_TAGS)) == 1
                        and parent_text != heading.get_text('\n', strip=True)):
                    return parent_text

            section = self._following_text(heading)
            if not section and parent is not None:
                section = self._following_text(parent)
            # Empty lets the next strategy try
            return section or None

        return None

    def _following_text(self, heading: Tag) -> str:
        parts = []
        for node in heading.next_siblings:
            if len(parts) >= self.sibling_window:
                break
            if isinstance(node, Comment):
                continue
            if isinstance(node, Tag):
                # Next game's block starts here
                if node.name in HEADING_TAGS or node.find(HEADING_TAGS) is not None:
                    break
                text = node.get_text('\n', strip=True)
            else:
                text = str(node).strip()
            if text:
                parts.append(text)
        return '\n'.join(parts)


class TextFallbackStrategy(SectionStrategy):
    """
    Degraded mode for markup whose structure changed but whose text did not:
    search the plain page text for '<game> results' and keep the trailing
    characters up to the next game's heading line.
    """

    name = 'text'

    def __init__(self, trailing_chars: int = 500):
        self.trailing_chars = trailing_chars

    def locate(self, document, config):
        text = document.text
        match = config.fallback_matcher.search(text)
        if not match:
            return None

        tail = text[match.end():match.end() + self.trailing_chars]
        cut = len(tail)
        for other in document.configs:
            boundary = other.fallback_matcher.search(tail)
            if boundary:
                cut = min(cut, boundary.start())
        return tail[:cut]


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in (text or '').splitlines() if line.strip()]


def classify_section_lines(lines: Iterable[str], expected_count: int) -> SectionReading:
    """
    Classify each line of a section independently of its position.

    Winning numbers are kept in encounter order and capped at
    ``expected_count``; bonus, date and jackpot keep the last match.
    """
    reading = SectionReading()

    for line in lines:
        bonus_match = BONUS_RE.match(line)
        if bonus_match:
            reading.bonus_number = int(bonus_match.group(1))
            continue

        if NUMBER_RE.match(line):
            if len(reading.winning_numbers) < expected_count:
                reading.winning_numbers.append(int(line))
            continue

        date_match = DATE_RE.match(line)
        if date_match:
            try:
                reading.draw_date = date.fromisoformat(date_match.group(1))
            except ValueError:
                logger.debug(f"Ignoring invalid date token: {line[:30]}")
            continue

        jackpot_match = JACKPOT_RE.search(line)
        if jackpot_match:
            amount = re.sub(r'\s+', '', jackpot_match.group(1)).rstrip(',.')
            reading.next_jackpot = amount

    return reading


class SectionParser:
    """
    Parses every configured game section out of one page of markup
    """

    def __init__(self, strategies: Optional[Sequence[SectionStrategy]] = None,
                 today_provider: Optional[Callable[[], date]] = None):
        if strategies is None:
            config = settings.LOTTERY_SCRAPER
            strategies = [
                HeadingSectionStrategy(
                    sibling_window=config['SECTION_SIBLING_WINDOW'],
                    short_parent_chars=config['SECTION_SHORT_PARENT_CHARS'],
                ),
                TextFallbackStrategy(trailing_chars=config['FALLBACK_TRAILING_CHARS']),
            ]
        self.strategies = list(strategies)
        self.today_provider = today_provider or source_today

    def parse(self, markup: str, configs: Sequence[GameConfig] = GAME_CONFIGS) -> List[ScrapedCandidate]:
        document = ParsedDocument(markup, configs)
        candidates = []

        for config in document.configs:
            candidate = self.parse_game(document, config)
            if candidate is not None:
                candidates.append(candidate)

        logger.info(f"Parsed {len(candidates)} of {len(document.configs)} game sections")
        return candidates

    def locate_section(self, document: ParsedDocument, config: GameConfig) -> Optional[str]:
        for strategy in self.strategies:
            section_text = strategy.locate(document, config)
            if section_text is not None:
                logger.debug(f"{config.display_name}: section located by '{strategy.name}' strategy")
                return section_text
        return None

    def parse_game(self, document: ParsedDocument, config: GameConfig) -> Optional[ScrapedCandidate]:
        section_text = self.locate_section(document, config)
        if section_text is None:
            logger.info(f"{config.display_name}: no section found on page")
            return None

        reading = classify_section_lines(split_lines(section_text), config.expected_number_count)

        found = len(reading.winning_numbers)
        if found != config.expected_number_count:
            logger.info(
                f"{config.display_name}: found {found} of {config.expected_number_count} numbers, "
                f"not yet parseable"
            )
            return None

        return ScrapedCandidate(
            game_slug=config.slug,
            game_name=config.display_name,
            winning_numbers=sorted(reading.winning_numbers),
            bonus_number=reading.bonus_number if config.has_bonus_number else None,
            draw_date=reading.draw_date or self.today_provider(),
            next_jackpot=reading.next_jackpot,
        )
