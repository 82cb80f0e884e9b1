from django.db import models
import uuid
import logging

logger = logging.getLogger(__name__)


class LotteryGame(models.Model):
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True, default='')
    number_count = models.PositiveSmallIntegerField(default=6)
    max_number = models.PositiveSmallIntegerField(default=50)
    has_bonus_ball = models.BooleanField(default=False)
    bonus_max_number = models.PositiveSmallIntegerField(null=True, blank=True)
    draw_days = models.JSONField(
        default=list,
        blank=True,
        help_text="Weekday names (e.g. ['Tuesday', 'Friday']) or ['Daily']"
    )
    draw_time = models.CharField(max_length=20, blank=True, default='', help_text="HH:MM (SAST)")
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return self.name

    class Meta:
        verbose_name = "Lottery Game"
        verbose_name_plural = "Lottery Games"
        ordering = ['id']


class LotteryResult(models.Model):
    unique_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    game_slug = models.CharField(max_length=255, db_index=True)
    game_name = models.CharField(max_length=255)
    winning_numbers = models.JSONField(default=list)
    bonus_number = models.PositiveSmallIntegerField(null=True, blank=True)
    draw_date = models.DateField()
    jackpot_amount = models.CharField(max_length=255, null=True, blank=True)
    next_jackpot = models.CharField(max_length=255, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.game_name} - {self.draw_date}"

    class Meta:
        verbose_name = "Lottery Result"
        verbose_name_plural = "Lottery Results"
        ordering = ['-draw_date', '-created_at']
        constraints = [
            models.UniqueConstraint(fields=['game_slug', 'draw_date'], name='uq_result_game_draw_date'),
        ]


class ScraperSetting(models.Model):
    """
    Admin-editable scraping schedule for one game
    """
    game_slug = models.CharField(max_length=255, unique=True)
    is_enabled = models.BooleanField(default=True)
    schedule_time = models.CharField(
        max_length=5,
        null=True,
        blank=True,
        help_text="HH:MM in SAST; the scraper starts looking for the draw at this time"
    )
    last_scraped_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        state = 'enabled' if self.is_enabled else 'disabled'
        return f"{self.game_slug} @ {self.schedule_time or '--:--'} ({state})"

    class Meta:
        verbose_name = "Scraper Setting"
        verbose_name_plural = "Scraper Settings"
        ordering = ['id']
