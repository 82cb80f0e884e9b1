#results\urls.py
from django.urls import path
from .admin_views import (
    scrape_now_view, scrape_range_view, scraper_status_view,
    scraper_test_view, scheduler_tick_view
)
from . import views
app_name = 'results'

urlpatterns = [
    # Scraper control (staff only)
    path('scrape/', scrape_now_view, name='scrape_now'),
    path('scrape/range/', scrape_range_view, name='scrape_range'),
    path('scraper/status/', scraper_status_view, name='scraper_status'),
    path('scraper/test/', scraper_test_view, name='scraper_test'),
    path('scraper-settings/', views.ScraperSettingsView.as_view(), name='scraper_settings'),

    # Tick endpoint for external cron service
    path('scheduler/tick/', scheduler_tick_view, name='scheduler_tick'),

    # Public listings
    path('games/', views.GameListView.as_view(), name='game-list'),
    path('games/<slug:slug>/results/', views.GameResultsView.as_view(), name='game-results'),
]
