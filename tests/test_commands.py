"""
Tests for the management commands.
"""

from io import StringIO
from unittest.mock import MagicMock, patch

import pytest
from django.core.management import call_command

from results.apps import should_autostart
from results.models import LotteryGame, ScraperSetting
from results.services.scheduler import TickOutcome
from helpers import sast

pytestmark = pytest.mark.django_db


def test_seed_lottery_data():
    LotteryGame.objects.all().delete()
    ScraperSetting.objects.all().delete()
    out = StringIO()

    call_command('seed_lottery_data', stdout=out)

    assert 'Games created: 7' in out.getvalue()
    assert ScraperSetting.objects.filter(is_enabled=True, schedule_time='21:30').count() == 7


def test_run_scraper_scheduler_once():
    scheduler = MagicMock()
    scheduler.tick.return_value = TickOutcome(checked_at=sast(2025, 11, 28, 21, 29))
    out = StringIO()

    with patch('results.management.commands.run_scraper_scheduler.get_scheduler', return_value=scheduler):
        call_command('run_scraper_scheduler', '--once', stdout=out)

    scheduler.tick.assert_called_once()
    assert 'Stopped' in out.getvalue()


def test_run_scraper_scheduler_reports_errors():
    scheduler = MagicMock()
    scheduler.tick.return_value = TickOutcome(
        checked_at=sast(2025, 11, 28, 21, 30), due=['powerball'], ran=True, error='down'
    )
    out = StringIO()

    with patch('results.management.commands.run_scraper_scheduler.get_scheduler', return_value=scheduler):
        call_command('run_scraper_scheduler', '--once', stdout=out)

    assert 'Scrape failed: down' in out.getvalue()


class TestAutostart:
    @pytest.fixture
    def autostart(self, settings):
        settings.LOTTERY_SCRAPER = {**settings.LOTTERY_SCRAPER, 'AUTOSTART': True}

    def test_disabled_by_default(self, settings):
        settings.LOTTERY_SCRAPER = {**settings.LOTTERY_SCRAPER, 'AUTOSTART': False}

        assert should_autostart(['gunicorn'], {}) is False

    def test_wsgi_process_hosts_ticker(self, autostart):
        assert should_autostart(['gunicorn', 'sa_lotto_project.wsgi'], {}) is True

    @pytest.mark.parametrize('command', ['migrate', 'shell', 'run_scraper_scheduler'])
    def test_management_commands_do_not(self, autostart, command):
        assert should_autostart(['manage.py', command], {}) is False

    def test_runserver_only_in_reloaded_child(self, autostart):
        assert should_autostart(['manage.py', 'runserver'], {}) is False
        assert should_autostart(['manage.py', 'runserver'], {'RUN_MAIN': 'true'}) is True
        assert should_autostart(['manage.py', 'runserver', '--noreload'], {}) is True
