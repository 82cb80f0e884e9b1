import logging
from django.core.cache import cache
import hashlib
from typing import Iterable, Optional

logger = logging.getLogger('lottery_app')


def make_cache_key(*args) -> str:
    """Create a consistent cache key"""
    key_string = "_".join(str(arg) for arg in args)
    if len(key_string) > 200:
        key_string = hashlib.md5(key_string.encode()).hexdigest()
    return f"sa_lotto_{key_string}"


def cache_game_results(game_slug: str, data: list, timeout: int = 300) -> bool:
    """Cache serialized results for a game"""
    try:
        cache.set(make_cache_key("game_results", game_slug), data, timeout)
        return True
    except Exception as e:
        logger.info(f"Cache unavailable: {e}")
        return False


def get_cached_game_results(game_slug: str) -> Optional[list]:
    try:
        data = cache.get(make_cache_key("game_results", game_slug))
        if data is not None:
            logger.info(f"Cache HIT: {game_slug} results")
        return data
    except Exception as e:
        logger.info(f"Cache read failed: {e}")
        return None


def invalidate_game_results_cache(game_slugs: Iterable[str]) -> bool:
    """Invalidate cached result listings for the given games"""
    try:
        cache.delete_many([make_cache_key("game_results", slug) for slug in set(game_slugs)])
        return True
    except Exception as e:
        logger.info(f"Cache invalidation failed: {e}")
        return False
