"""
Django Management Command: Scraper Scheduler Worker

Runs the scheduler tick in the foreground. Each tick checks every enabled
game and scrapes the source when a game's draw is due.

Usage:
    python manage.py run_scraper_scheduler

To run in background (Linux/Mac):
    nohup python manage.py run_scraper_scheduler &
"""

import time
import logging
from django.core.management.base import BaseCommand
from results.apps import get_scheduler

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Background worker that runs the results scraper scheduler every 60 seconds'

    def add_arguments(self, parser):
        parser.add_argument(
            '--interval',
            type=int,
            default=60,
            help='Tick interval in seconds (default: 60)'
        )
        parser.add_argument(
            '--once',
            action='store_true',
            help='Run a single tick and exit (useful for testing)'
        )

    def handle(self, *args, **options):
        interval = options['interval']
        run_once = options['once']
        scheduler = get_scheduler()

        self.stdout.write(self.style.SUCCESS('Scraper Scheduler Worker Started'))
        self.stdout.write(f'Tick interval: {interval} seconds')

        if run_once:
            self.stdout.write(self.style.WARNING('Running in ONE-TIME mode'))

        try:
            while True:
                try:
                    self.stdout.write(f'Tick at {time.strftime("%Y-%m-%d %H:%M:%S")}')
                    outcome = scheduler.tick()

                    if outcome.due:
                        self.stdout.write(f"Due: {', '.join(outcome.due)}")
                    if outcome.error:
                        self.stdout.write(self.style.ERROR(f'Scrape failed: {outcome.error}'))
                    elif outcome.report is not None:
                        self.stdout.write(self.style.SUCCESS(
                            f'Added {outcome.report.added_count} results; '
                            f"satisfied: {', '.join(outcome.satisfied) or 'none'}"
                        ))

                except Exception as e:
                    logger.error(f'Error in tick: {e}', exc_info=True)
                    self.stdout.write(self.style.ERROR(f'Error: {e}'))

                if run_once:
                    break

                time.sleep(interval)

        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING('\nWorker stopped by user'))
        finally:
            self.stdout.write(self.style.SUCCESS('Scraper Scheduler Worker Stopped'))
