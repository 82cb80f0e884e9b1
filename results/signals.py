import logging
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver
from .models import LotteryResult
from .utils.cache_utils import invalidate_game_results_cache

logger = logging.getLogger('lottery_app')


@receiver(post_save, sender=LotteryResult)
@receiver(post_delete, sender=LotteryResult)
def lottery_result_changed_handler(sender, instance, **kwargs):
    """
    Drop the cached listing of a game whenever one of its results changes
    """
    if invalidate_game_results_cache([instance.game_slug]):
        logger.info(f"Cache invalidated for game: {instance.game_slug}")


def initialize_default_data_handler(sender, **kwargs):
    """
    Create the default games and scraper settings once the tables exist
    """
    from .services.result_store import DjangoResultStore
    DjangoResultStore().initialize_default_data()
