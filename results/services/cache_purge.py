"""
CDN cache invalidation after new results are stored.

Fire-and-forget: a purge never blocks or fails ingestion. Missing Cloudflare
credentials turn every call into a no-op.
"""

import logging
import threading
from typing import Iterable, List, Optional

import requests
from django.conf import settings

from results.games import LOTTERY_GROUPS, canonical_slug
from results.utils.cache_utils import invalidate_game_results_cache

logger = logging.getLogger(__name__)

CF_API_BASE = "https://api.cloudflare.com/client/v4"

# Pages whose content changes when the source-local date rolls over
DAILY_PURGE_PATHS = ["/game/jackpot", "/sitemap.xml", "/"]


def get_cloudflare_config() -> Optional[dict]:
    config = getattr(settings, 'CLOUDFLARE', {}) or {}
    required = ('API_KEY', 'ZONE_ID', 'EMAIL', 'BASE_URL')
    if not all(config.get(key) for key in required):
        return None
    return {**config, 'BASE_URL': config['BASE_URL'].rstrip('/')}


def build_purge_paths(results: Iterable[dict]) -> List[str]:
    """
    Logical site paths affected by the given results

    Args:
        results: Dicts with 'game_slug' and 'date' (ISO draw date)
    """
    paths = []

    def add(path):
        if path not in paths:
            paths.append(path)

    for result in results:
        if not result:
            continue
        slug = result['game_slug']
        group_slug = canonical_slug(slug)
        group_info = LOTTERY_GROUPS.get(group_slug)

        add(f"/game/{slug}")
        add(f"/draw-history/{slug}")
        add(f"/draw-history/{group_slug}")
        add(f"/{group_slug}-result/{result['date']}")
        if group_info:
            for member in group_info['slugs']:
                add(f"/game/{member}")
            add(group_info['yesterday_path'])

    return paths


def build_urls(paths: Iterable[str], base_url: str) -> List[str]:
    urls = []
    for path in paths:
        url = f"{base_url}{'' if path.startswith('/') else '/'}{path}"
        if url not in urls:
            urls.append(url)
    return urls


def purge_cloudflare_site(paths: Optional[List[str]] = None) -> bool:
    """
    Ask Cloudflare to drop the cached copies of the given paths

    Returns:
        True when the purge request was accepted, False otherwise
    """
    config = get_cloudflare_config()
    if not config:
        return False

    targets = build_urls(paths or DAILY_PURGE_PATHS, config['BASE_URL'])
    if not targets:
        return False

    try:
        response = requests.post(
            f"{CF_API_BASE}/zones/{config['ZONE_ID']}/purge_cache",
            json={'files': targets},
            headers={
                'X-Auth-Key': config['API_KEY'],
                'X-Auth-Email': config['EMAIL'],
            },
            timeout=config.get('TIMEOUT', 10),
        )
    except requests.RequestException as e:
        logger.error(f"[Cloudflare] URL purge error: {e}")
        return False

    if not response.ok:
        logger.error(f"[Cloudflare] URL purge failed: {response.status_code} {response.text[:200]}")
        return False

    logger.info(f"[Cloudflare] URL purge triggered for {len(targets)} URLs")
    return True


def purge_in_background(paths: List[str]) -> threading.Thread:
    thread = threading.Thread(
        target=purge_cloudflare_site,
        args=(paths,),
        name='cloudflare-purge',
        daemon=True,
    )
    thread.start()
    return thread


def schedule_purge(results: List[dict]) -> Optional[threading.Thread]:
    """
    Invalidate local listings and start a background CDN purge for new results
    """
    if not results:
        return None

    invalidate_game_results_cache(result['game_slug'] for result in results)
    return purge_in_background(build_purge_paths(results))


def schedule_daily_purge() -> threading.Thread:
    """Background CDN purge of the pages that change with the date"""
    return purge_in_background(list(DAILY_PURGE_PATHS))
