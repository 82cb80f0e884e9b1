"""
Tests for the results page section parser.
"""

from datetime import date

import pytest

from results.games import GAME_CONFIGS_BY_SLUG
from results.services.section_parser import (
    HeadingSectionStrategy,
    ParsedDocument,
    SectionParser,
    TextFallbackStrategy,
    classify_section_lines,
)

POWERBALL = GAME_CONFIGS_BY_SLUG['powerball']
DAILY_LOTTO = GAME_CONFIGS_BY_SLUG['daily-lotto']


def card(heading, *lines):
    body = ''.join(f'<p>{line}</p>' for line in lines)
    return f'<div class="card"><h2>{heading}</h2>{body}</div>'


def page(*cards):
    return f'<html><body><main>{"".join(cards)}</main></body></html>'


class TestFixturePage:
    """The stored fixture page parses into both games."""

    def test_parses_both_games(self, parser, results_page):
        candidates = parser.parse(results_page)
        by_slug = {c.game_slug: c for c in candidates}

        assert set(by_slug) == {'powerball', 'daily-lotto'}

    def test_powerball_candidate(self, parser, results_page):
        powerball = {c.game_slug: c for c in parser.parse(results_page)}['powerball']

        assert powerball.game_name == 'Powerball'
        assert powerball.winning_numbers == [3, 7, 19, 32, 45]
        assert powerball.bonus_number == 14
        assert powerball.draw_date == date(2025, 11, 28)
        assert powerball.next_jackpot == 'R62,000,000'

    def test_daily_lotto_has_no_bonus(self, parser, results_page):
        daily = {c.game_slug: c for c in parser.parse(results_page)}['daily-lotto']

        assert daily.winning_numbers == [4, 11, 17, 29, 36]
        assert daily.bonus_number is None
        assert daily.next_jackpot == 'R540,000'


class TestCountValidation:
    """A section must yield exactly the expected count of numbers."""

    def test_one_number_short_yields_nothing(self, parser):
        markup = page(card('Powerball results', '2025-11-28', '01', '02', '03', '04', '+05'))

        assert parser.parse(markup, [POWERBALL]) == []

    def test_exact_count_yields_sorted_candidate(self, parser):
        markup = page(card('Powerball results', '2025-11-28', '44', '09', '31', '02', '17', '+05'))

        candidates = parser.parse(markup, [POWERBALL])

        assert len(candidates) == 1
        assert candidates[0].winning_numbers == [2, 9, 17, 31, 44]

    def test_extra_numbers_are_ignored_after_count(self, parser):
        markup = page(card('Daily Lotto results', '01', '02', '03', '04', '05', '06', '07'))

        candidates = parser.parse(markup, [DAILY_LOTTO])

        assert candidates[0].winning_numbers == [1, 2, 3, 4, 5]


class TestIndependence:
    def test_malformed_game_does_not_block_others(self, parser):
        markup = page(
            card('Powerball results', '2025-11-28', '01', '02', '03', '+05'),
            card('Daily Lotto results', '2025-11-28', '10', '20', '30', '31', '32'),
        )

        candidates = parser.parse(markup, [POWERBALL, DAILY_LOTTO])

        assert [c.game_slug for c in candidates] == ['daily-lotto']

    def test_similar_names_do_not_collide(self, parser):
        markup = page(
            card('Powerball Plus results', '2025-11-28', '11', '12', '13', '14', '15', '+01'),
        )

        assert parser.parse(markup, [POWERBALL]) == []


class TestLineClassification:
    def test_order_insensitive(self):
        reading = classify_section_lines(
            ['Estimated Jackpot: R 3,000,000', '+07', '05', '2025-11-28', '01', '02', '03', '04'], 5
        )

        assert reading.winning_numbers == [5, 1, 2, 3, 4]
        assert reading.bonus_number == 7
        assert reading.draw_date == date(2025, 11, 28)
        assert reading.next_jackpot == 'R3,000,000'

    def test_backslash_bonus(self):
        assert classify_section_lines(['\\+09'], 5).bonus_number == 9

    def test_last_bonus_date_and_jackpot_win(self):
        reading = classify_section_lines(
            ['+01', '2025-11-25', 'Next draw: R 1,000,000', '+02', '2025-11-28',
             'Estimated Jackpot for Tuesday: R 2,000,000'],
            5,
        )

        assert reading.bonus_number == 2
        assert reading.draw_date == date(2025, 11, 28)
        assert reading.next_jackpot == 'R2,000,000'

    def test_other_lines_ignored(self):
        reading = classify_section_lines(['Draw 1234', '5', '123', 'Winners: 3'], 5)

        assert reading.winning_numbers == []
        assert reading.bonus_number is None
        assert reading.draw_date is None

    def test_invalid_calendar_date_ignored(self):
        assert classify_section_lines(['2025-02-30'], 5).draw_date is None


class TestDateDefault:
    def test_missing_date_defaults_to_today(self):
        parser = SectionParser(today_provider=lambda: date(2026, 1, 2))
        markup = page(card('Daily Lotto results', '10', '20', '30', '31', '32'))

        candidates = parser.parse(markup, [DAILY_LOTTO])

        assert candidates[0].draw_date == date(2026, 1, 2)


class TestHeadingStrategy:
    def test_sibling_window_stops_at_next_heading(self, parser):
        markup = (
            '<html><body><section>'
            '<h3>Daily Lotto results</h3><p>01</p><p>02</p><p>03</p>'
            '<h3>Lotto results</h3><p>04</p><p>05</p><p>06</p>'
            '</section></body></html>'
        )

        assert parser.parse(markup, [DAILY_LOTTO]) == []

    def test_sibling_window_is_bounded(self):
        strategy = HeadingSectionStrategy(sibling_window=3, short_parent_chars=0)
        markup = (
            '<html><body><section><h3>Daily Lotto results</h3>'
            + ''.join(f'<p>{n:02d}</p>' for n in range(1, 8))
            + '</section></body></html>'
        )
        document = ParsedDocument(markup, [DAILY_LOTTO])

        assert strategy.locate(document, DAILY_LOTTO).split('\n') == ['01', '02', '03']

    def test_short_parent_text_is_used(self):
        strategy = HeadingSectionStrategy()
        markup = '<html><body><div><span>2025-11-28</span><h4>Powerball Result</h4><b>01</b></div></body></html>'
        document = ParsedDocument(markup, [POWERBALL])

        section = strategy.locate(document, POWERBALL)

        assert '2025-11-28' in section
        assert '01' in section

    def test_heading_in_its_own_wrapper_reads_following_block(self, parser):
        markup = page(
            '<div class="card"><div class="title"><h2>Powerball results</h2></div>'
            '<div class="balls"><span>2025-11-28</span><span>01</span><span>02</span>'
            '<span>03</span><span>04</span><span>05</span><span>+06</span></div></div>'
        )

        [candidate] = parser.parse(markup, [POWERBALL])

        assert candidate.winning_numbers == [1, 2, 3, 4, 5]
        assert candidate.bonus_number == 6
        assert candidate.draw_date == date(2025, 11, 28)

    def test_heading_with_no_content_defers_to_next_strategy(self):
        strategy = HeadingSectionStrategy()
        markup = '<html><body><div><h2>Powerball results</h2></div></body></html>'
        document = ParsedDocument(markup, [POWERBALL])

        assert strategy.locate(document, POWERBALL) is None


class TestTextFallback:
    MARKUP = (
        '<html><body><p>'
        'Powerball results<br>2025-11-28<br>05<br>10<br>15<br>20<br>25<br>+03<br>'
        'Powerball Plus results<br>2025-11-28<br>01<br>02<br>03<br>04<br>06<br>+07'
        '</p></body></html>'
    )

    def test_fallback_finds_sections_without_headings(self, parser):
        configs = [POWERBALL, GAME_CONFIGS_BY_SLUG['powerball-plus']]

        by_slug = {c.game_slug: c for c in parser.parse(self.MARKUP, configs)}

        assert by_slug['powerball'].winning_numbers == [5, 10, 15, 20, 25]
        assert by_slug['powerball'].bonus_number == 3
        assert by_slug['powerball-plus'].winning_numbers == [1, 2, 3, 4, 6]
        assert by_slug['powerball-plus'].bonus_number == 7

    def test_fallback_window_is_bounded(self):
        strategy = TextFallbackStrategy(trailing_chars=12)
        document = ParsedDocument(self.MARKUP, [POWERBALL])

        section = strategy.locate(document, POWERBALL)

        assert len(section) <= 12

    def test_heading_strategy_only(self):
        parser = SectionParser(strategies=[HeadingSectionStrategy()], today_provider=date.today)

        assert parser.parse(self.MARKUP, [POWERBALL]) == []


@pytest.mark.parametrize('markup', ['', '<html></html>', 'not html at all'])
def test_empty_markup_yields_nothing(parser, markup):
    assert parser.parse(markup) == []
