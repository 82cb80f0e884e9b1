# admin_views.py - Scraper control endpoints for staff and the external cron
from django.contrib.admin.views.decorators import staff_member_required
from django.views.decorators.csrf import csrf_protect, csrf_exempt
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST
from django.conf import settings
from .apps import get_scheduler
from .serializers import ScrapeRangeSerializer
from .services.lottery_scraper import LotteryScraperError, ScraperBusyError
import json
import time
import logging

logger = logging.getLogger('lottery_app')


def _scrape_failure(e, status):
    return JsonResponse({
        'success': False,
        'error': 'Failed to scrape results',
        'message': str(e),
        'scraped': 0,
        'added': 0,
    }, status=status)


#<-----------------SCRAPER API ENDPOINTS----------------->
@csrf_protect
@staff_member_required
@require_POST
def scrape_now_view(request):
    """
    Scrape every game now and store whatever is new
    """
    try:
        result = get_scheduler().run_now()
        return JsonResponse(result.to_response())

    except ScraperBusyError as e:
        logger.info(f"Manual scrape rejected: {e}")
        return _scrape_failure(e, status=409)
    except LotteryScraperError as e:
        logger.error(f"Manual scrape failed: {e}")
        return _scrape_failure(e, status=502)
    except Exception as e:
        logger.error(f"Error in scrape_now: {str(e)}", exc_info=True)
        return _scrape_failure(e, status=500)


@csrf_protect
@staff_member_required
@require_POST
def scrape_range_view(request):
    """
    Scrape now, keeping only draws within a date range

    Body: {"start_date": "YYYY-MM-DD", "end_date": "YYYY-MM-DD", "game_slugs": [...]}
    """
    try:
        data = json.loads(request.body or b'{}')
    except json.JSONDecodeError:
        return JsonResponse({
            'success': False,
            'error': 'Invalid JSON data'
        }, status=400)

    serializer = ScrapeRangeSerializer(data=data)
    if not serializer.is_valid():
        return JsonResponse({
            'success': False,
            'error': 'Invalid request',
            'details': serializer.errors
        }, status=400)

    params = serializer.validated_data
    try:
        result = get_scheduler().run_for_range(
            params['start_date'], params['end_date'], params.get('game_slugs') or None
        )
        response = result.to_response()
        response['start_date'] = params['start_date'].isoformat()
        response['end_date'] = params['end_date'].isoformat()
        response['outOfRange'] = result.filtered_out
        return JsonResponse(response)

    except ScraperBusyError as e:
        logger.info(f"Range scrape rejected: {e}")
        return _scrape_failure(e, status=409)
    except LotteryScraperError as e:
        logger.error(f"Range scrape failed: {e}")
        return _scrape_failure(e, status=502)
    except Exception as e:
        logger.error(f"Error in scrape_range: {str(e)}", exc_info=True)
        return _scrape_failure(e, status=500)


@staff_member_required
@require_GET
def scraper_status_view(request):
    """
    Current run state of every game and whether a scrape is in flight
    """
    return JsonResponse(get_scheduler().status())


@staff_member_required
@require_POST
def scraper_test_view(request):
    """
    One fetch + parse attempt against the source without storing anything
    """
    try:
        return JsonResponse(get_scheduler().check_source())
    except ScraperBusyError as e:
        logger.info(f"Scraper test rejected: {e}")
        return JsonResponse({
            'success': False,
            'message': str(e),
            'count': 0,
        }, status=409)


@csrf_exempt
@require_POST
def scheduler_tick_view(request):
    """
    Run one scheduler tick
    Called by an external cron service every minute when the in-process
    ticker is not started

    Security: Requires Bearer token authentication (CSRF exempt for external API calls)
    """
    auth_header = request.headers.get('Authorization', '')
    expected_token = getattr(settings, 'SCRAPER_API_TOKEN', None)

    if not expected_token:
        logger.error("SCRAPER_API_TOKEN not configured in settings")
        return JsonResponse({
            'success': False,
            'error': 'API token not configured on server'
        }, status=500)

    if auth_header != f'Bearer {expected_token}':
        logger.warning(f"Unauthorized tick attempt with token: {auth_header[:20]}...")
        return JsonResponse({
            'success': False,
            'error': 'Unauthorized - Invalid or missing token'
        }, status=401)

    start_time = time.time()
    try:
        outcome = get_scheduler().tick()
    except Exception as e:
        elapsed = time.time() - start_time
        logger.error(f"Tick error after {elapsed:.2f}s: {e}", exc_info=True)
        return JsonResponse({
            'success': False,
            'error': f'Tick failed: {str(e)}',
            'elapsed_seconds': elapsed
        }, status=500)

    elapsed = time.time() - start_time
    if outcome.skipped_busy:
        return JsonResponse({
            'success': False,
            'message': 'Another scrape is in progress',
            'outcome': outcome.to_dict()
        }, status=429)

    return JsonResponse({
        'success': outcome.error is None,
        'message': f'Tick completed in {elapsed:.2f}s',
        'outcome': outcome.to_dict()
    })
