"""
Static table of the supported South African lottery games.

One entry per game section on the source page. The table is read-only and
shared by the parser, the scheduler and the default-data seeding.
"""

import re
from dataclasses import dataclass
from datetime import date, time
from typing import Dict, Iterable, Optional, Tuple


WEEKDAYS = ('Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday')
DAILY = 'Daily'

SCHEDULE_TIME_RE = re.compile(r'^([01]\d|2[0-3]):([0-5]\d)$')


@dataclass(frozen=True)
class GameConfig:
    slug: str
    display_name: str
    expected_number_count: int
    has_bonus_number: bool
    max_number: int
    bonus_max_number: Optional[int]
    draw_days: Tuple[str, ...]
    draw_time: str = '21:00'
    default_schedule_time: str = '21:30'
    description: str = ''

    @property
    def section_matcher(self):
        """Matches a structural heading such as 'Powerball results'"""
        return re.compile(
            r'^\s*' + re.escape(self.display_name) + r'\s+results?\s*$',
            re.IGNORECASE,
        )

    @property
    def fallback_matcher(self):
        """Matches the same heading as a line of plain page text"""
        return re.compile(
            r'^[ \t]*' + re.escape(self.display_name) + r'[ \t]+results?[ \t]*$',
            re.IGNORECASE | re.MULTILINE,
        )


GAME_CONFIGS: Tuple[GameConfig, ...] = (
    GameConfig(
        slug='powerball',
        display_name='Powerball',
        expected_number_count=5,
        has_bonus_number=True,
        max_number=50,
        bonus_max_number=20,
        draw_days=('Tuesday', 'Friday'),
        description="South Africa's biggest lottery game with massive jackpots",
    ),
    GameConfig(
        slug='powerball-plus',
        display_name='Powerball Plus',
        expected_number_count=5,
        has_bonus_number=True,
        max_number=50,
        bonus_max_number=20,
        draw_days=('Tuesday', 'Friday'),
        description='Add-on game for Powerball players',
    ),
    GameConfig(
        slug='lotto',
        display_name='Lotto',
        expected_number_count=6,
        has_bonus_number=True,
        max_number=52,
        bonus_max_number=52,
        draw_days=('Wednesday', 'Saturday'),
        description='Classic 6-ball lottery game',
    ),
    GameConfig(
        slug='lotto-plus-1',
        display_name='Lotto Plus 1',
        expected_number_count=6,
        has_bonus_number=True,
        max_number=52,
        bonus_max_number=52,
        draw_days=('Wednesday', 'Saturday'),
        description='First add-on game for Lotto',
    ),
    GameConfig(
        slug='lotto-plus-2',
        display_name='Lotto Plus 2',
        expected_number_count=6,
        has_bonus_number=True,
        max_number=52,
        bonus_max_number=52,
        draw_days=('Wednesday', 'Saturday'),
        description='Second add-on game for Lotto',
    ),
    GameConfig(
        slug='daily-lotto',
        display_name='Daily Lotto',
        expected_number_count=5,
        has_bonus_number=False,
        max_number=36,
        bonus_max_number=None,
        draw_days=(DAILY,),
        description='Daily draw with 5 numbers',
    ),
    GameConfig(
        slug='daily-lotto-plus',
        display_name='Daily Lotto Plus',
        expected_number_count=5,
        has_bonus_number=False,
        max_number=36,
        bonus_max_number=None,
        draw_days=(DAILY,),
        description='Add-on for Daily Lotto',
    ),
)

GAME_CONFIGS_BY_SLUG: Dict[str, GameConfig] = {config.slug: config for config in GAME_CONFIGS}

# Games sharing one draw event, purged together
LOTTERY_GROUPS = {
    'powerball': {
        'slugs': ['powerball', 'powerball-plus'],
        'yesterday_path': '/powerball-result/yesterday',
    },
    'lotto': {
        'slugs': ['lotto', 'lotto-plus-1', 'lotto-plus-2'],
        'yesterday_path': '/lotto-result/yesterday',
    },
    'daily-lotto': {
        'slugs': ['daily-lotto', 'daily-lotto-plus'],
        'yesterday_path': '/daily-lotto-result/yesterday',
    },
}


def get_group_for_slug(slug: str) -> Optional[Tuple[str, dict]]:
    for group_slug, group in LOTTERY_GROUPS.items():
        if slug in group['slugs']:
            return group_slug, group
    return None


def canonical_slug(slug: str) -> str:
    group = get_group_for_slug(slug)
    return group[0] if group else slug


def is_draw_day(draw_days: Iterable[str], day: date) -> bool:
    """Check whether ``day`` is one of the configured draw days"""
    names = {str(d).strip().lower() for d in (draw_days or [])}
    if DAILY.lower() in names:
        return True
    return WEEKDAYS[day.weekday()].lower() in names


def parse_schedule_time(value: str) -> time:
    """Parse an 'HH:MM' schedule time, raising ValueError when malformed"""
    match = SCHEDULE_TIME_RE.match((value or '').strip())
    if not match:
        raise ValueError(f"Invalid schedule time '{value}', expected HH:MM")
    return time(int(match.group(1)), int(match.group(2)))
