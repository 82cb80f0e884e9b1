import pytz
from django.conf import settings
from django.utils import timezone


def source_timezone():
    """Time zone the source publishes in (SAST)"""
    return pytz.timezone(settings.LOTTERY_SCRAPER['SOURCE_TIME_ZONE'])


def source_now():
    return timezone.now().astimezone(source_timezone())


def source_today():
    return source_now().date()
