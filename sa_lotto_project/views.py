from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny
from django.apps import apps
from django.utils import timezone
from django.db import connection
from django.core.cache import cache
from results.models import LotteryResult, ScraperSetting
import logging

logger = logging.getLogger('lottery_app')

class HealthCheckView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        """Health check with database, cache and scheduler monitoring"""
        try:
            # Check database
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                db_status = "connected"

            # Check cache
            try:
                cache.set('health_check', 'ok', 30)
                cache_result = cache.get('health_check')
                cache_status = "connected" if cache_result == 'ok' else "disconnected"
            except Exception:
                cache_status = "disconnected"

            scheduler = apps.get_app_config('results').scheduler
            stats = {
                'total_results': LotteryResult.objects.count(),
                'enabled_games': ScraperSetting.objects.filter(is_enabled=True).count(),
                'scrape_in_progress': bool(scheduler and scheduler.is_running),
            }

            health_data = {
                'status': 'healthy' if db_status == 'connected' else 'unhealthy',
                'timestamp': timezone.now().isoformat(),
                'database': db_status,
                'cache': cache_status,
                'stats': stats
            }

            status_code = 200 if db_status == 'connected' else 503
            return Response(health_data, status=status_code)

        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return Response({
                'status': 'unhealthy',
                'timestamp': timezone.now().isoformat(),
                'error': str(e)
            }, status=503)
