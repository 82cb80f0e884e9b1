# views.py
from django.conf import settings
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework import generics
import logging

from .games import GAME_CONFIGS_BY_SLUG
from .models import LotteryGame, LotteryResult
from .serializers import LotteryGameSerializer, LotteryResultSerializer, ScraperSettingSerializer
from .services.result_store import DjangoResultStore
from .utils.cache_utils import cache_game_results, get_cached_game_results

logger = logging.getLogger('lottery_app')


class GameListView(generics.ListAPIView):
    """
    API endpoint to list the configured lottery games
    """
    serializer_class = LotteryGameSerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        return LotteryGame.objects.filter(is_active=True).order_by('id')


class GameResultsView(APIView):
    """
    API endpoint to get the latest stored results of one game
    """
    permission_classes = [AllowAny]

    def get(self, request, slug):
        if slug not in GAME_CONFIGS_BY_SLUG:
            return Response({
                'status': 'error',
                'message': f'Unknown game: {slug}'
            }, status=status.HTTP_404_NOT_FOUND)

        cached = get_cached_game_results(slug)
        if cached is not None:
            return Response({'status': 'success', 'game_slug': slug, 'results': cached})

        lottery_settings = getattr(settings, 'LOTTERY_SETTINGS', {})
        limit = lottery_settings.get('GAME_RESULTS_LIMIT', 20)
        queryset = LotteryResult.objects.filter(game_slug=slug).order_by('-draw_date', '-created_at')[:limit]
        data = LotteryResultSerializer(queryset, many=True).data

        cache_game_results(slug, data, lottery_settings.get('GAME_RESULTS_CACHE_TIMEOUT', 300))
        return Response({'status': 'success', 'game_slug': slug, 'results': data})


class ScraperSettingsView(APIView):
    """
    List scraper settings, or create/update the setting of one game
    """
    permission_classes = [IsAdminUser]

    def get(self, request):
        store = DjangoResultStore()
        serializer = ScraperSettingSerializer(store.get_scraper_settings(), many=True)
        return Response({'status': 'success', 'settings': serializer.data})

    def post(self, request):
        serializer = ScraperSettingSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({
                'status': 'error',
                'message': 'Invalid scraper setting',
                'errors': serializer.errors
            }, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        setting = DjangoResultStore().upsert_scraper_setting(
            data['game_slug'],
            is_enabled=data.get('is_enabled', True),
            schedule_time=data.get('schedule_time'),
        )
        logger.info(f"Scraper setting saved by {request.user}: {setting}")
        return Response({
            'status': 'success',
            'setting': ScraperSettingSerializer(setting).data
        })
