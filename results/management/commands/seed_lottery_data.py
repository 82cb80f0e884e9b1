from django.core.management.base import BaseCommand
from results.games import GAME_CONFIGS
from results.services.result_store import DjangoResultStore


class Command(BaseCommand):
    help = 'Creates the default lottery games and scraper settings that do not exist yet'

    def handle(self, *args, **kwargs):
        self.stdout.write('Creating lottery games and scraper settings...')
        created = DjangoResultStore().initialize_default_data(GAME_CONFIGS)

        self.stdout.write(f"Games created: {created['games']}")
        self.stdout.write(f"Scraper settings created: {created['settings']}")
        self.stdout.write(self.style.SUCCESS('Successfully seeded lottery data'))
