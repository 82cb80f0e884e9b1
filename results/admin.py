# admin.py
from django.contrib import admin, messages
from .models import LotteryGame, LotteryResult, ScraperSetting


@admin.register(LotteryGame)
class LotteryGameAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'number_count', 'max_number', 'has_bonus_ball', 'draw_time', 'is_active']
    list_filter = ['is_active', 'has_bonus_ball']
    search_fields = ['name', 'slug']


@admin.register(LotteryResult)
class LotteryResultAdmin(admin.ModelAdmin):
    list_display = ['game_name', 'draw_date', 'numbers_display', 'bonus_number', 'next_jackpot', 'created_at']
    list_filter = ['game_slug', 'draw_date']
    search_fields = ['game_name', 'game_slug', 'unique_id']
    readonly_fields = ['unique_id', 'created_at', 'updated_at']
    date_hierarchy = 'draw_date'
    ordering = ['-draw_date', 'game_slug']

    def numbers_display(self, obj):
        return ', '.join(str(n) for n in obj.winning_numbers or [])

    numbers_display.short_description = 'Winning numbers'


@admin.register(ScraperSetting)
class ScraperSettingAdmin(admin.ModelAdmin):
    list_display = ['game_slug', 'is_enabled', 'schedule_time', 'last_scraped_at']
    list_editable = ['is_enabled', 'schedule_time']
    readonly_fields = ['last_scraped_at']
    ordering = ['id']

    actions = ['enable_settings', 'disable_settings', 'scrape_now']

    def enable_settings(self, request, queryset):
        """Enable scheduled scraping for the selected games"""
        count = queryset.update(is_enabled=True)
        self.message_user(request, f'{count} game(s) enabled.', messages.SUCCESS)

    enable_settings.short_description = 'Enable scheduled scraping'

    def disable_settings(self, request, queryset):
        """Disable scheduled scraping for the selected games"""
        count = queryset.update(is_enabled=False)
        self.message_user(request, f'{count} game(s) disabled.', messages.SUCCESS)

    disable_settings.short_description = 'Disable scheduled scraping'

    def scrape_now(self, request, queryset):
        """Run an on-demand scrape of every game"""
        from .apps import get_scheduler
        from .services.lottery_scraper import LotteryScraperError

        try:
            result = get_scheduler().run_now()
        except LotteryScraperError as e:
            self.message_user(request, f'Scrape failed: {e}', messages.ERROR)
            return

        self.message_user(
            request,
            f"Scraped {len(result.candidates)} results, added {result.report.added_count}",
            messages.SUCCESS if result.report.added_count else messages.INFO
        )

    scrape_now.short_description = 'Scrape all games now'
