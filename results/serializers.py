# serializers.py
from rest_framework import serializers
from .games import GAME_CONFIGS_BY_SLUG, parse_schedule_time
from .models import LotteryGame, LotteryResult, ScraperSetting


class LotteryResultSerializer(serializers.ModelSerializer):
    class Meta:
        model = LotteryResult
        fields = [
            'unique_id',
            'game_slug',
            'game_name',
            'winning_numbers',
            'bonus_number',
            'draw_date',
            'jackpot_amount',
            'next_jackpot',
            'created_at',
        ]


class LotteryGameSerializer(serializers.ModelSerializer):
    class Meta:
        model = LotteryGame
        fields = [
            'name', 'slug', 'description', 'number_count', 'max_number',
            'has_bonus_ball', 'bonus_max_number', 'draw_days', 'draw_time', 'is_active',
        ]


def validate_game_slug(value):
    if value not in GAME_CONFIGS_BY_SLUG:
        raise serializers.ValidationError(f"Unknown game: {value}")
    return value


class ScraperSettingSerializer(serializers.ModelSerializer):
    game_slug = serializers.CharField(max_length=50, validators=[validate_game_slug])
    is_enabled = serializers.BooleanField(required=False, default=True)
    schedule_time = serializers.CharField(max_length=5, required=False, allow_null=True)

    class Meta:
        model = ScraperSetting
        fields = ['game_slug', 'is_enabled', 'schedule_time', 'last_scraped_at']
        read_only_fields = ['last_scraped_at']

    def validate_schedule_time(self, value):
        """Schedule times are HH:MM in source-local time"""
        if value in (None, ''):
            return None
        try:
            parsed = parse_schedule_time(value)
        except ValueError as e:
            raise serializers.ValidationError(str(e))
        return parsed.strftime('%H:%M')


class ScrapeRangeSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    game_slugs = serializers.ListField(
        child=serializers.CharField(validators=[validate_game_slug]),
        required=False,
        allow_empty=True,
    )

    def validate(self, data):
        if data['start_date'] > data['end_date']:
            raise serializers.ValidationError("start_date must be on or before end_date")
        return data
