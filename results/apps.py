import os
import sys

from django.apps import AppConfig
from django.conf import settings
from django.db.models.signals import post_migrate


def should_autostart(argv=None, environ=None):
    """
    Whether this process should host the in-process ticker.

    Management commands never do, except the serving process of runserver;
    run_scraper_scheduler drives its own loop.
    """
    if not settings.LOTTERY_SCRAPER.get('AUTOSTART'):
        return False

    argv = sys.argv if argv is None else argv
    environ = os.environ if environ is None else environ

    if argv and os.path.basename(argv[0]) == 'manage.py':
        command = argv[1] if len(argv) > 1 else ''
        if command != 'runserver':
            return False
        # The autoreloader parent only watches files
        return '--noreload' in argv or environ.get('RUN_MAIN') == 'true'

    return True


class ResultsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'results'
    verbose_name = 'SA Lottery Results'

    scheduler = None

    def ready(self):
        import results.signals
        from results.services.scheduler import ScraperScheduler

        post_migrate.connect(results.signals.initialize_default_data_handler, sender=self)

        self.scheduler = ScraperScheduler.from_settings()
        if should_autostart():
            self.scheduler.start()


def get_scheduler():
    """The process-wide scheduler built when the app loaded"""
    from django.apps import apps
    return apps.get_app_config('results').scheduler
