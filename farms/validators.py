"""
Shared field validators for operational records.
"""

from datetime import timedelta

from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.utils import timezone

TIME_PATTERN = r'^([01]?[0-9]|2[0-3]):[0-5][0-9]$'

validate_time_of_day = RegexValidator(
    regex=TIME_PATTERN,
    message='Invalid time format (HH:MM)',
)


def validate_recent_record_date(value):
    """Operational records may be dated up to tomorrow and at most a year back."""
    today = timezone.localdate()
    if value > today + timedelta(days=1):
        raise ValidationError('Date cannot be in the future')
    if value < today - timedelta(days=365):
        raise ValidationError('Date cannot be more than 1 year in the past')


def parse_hour(time_value):
    return int(str(time_value).split(':')[0])


def normalize_time_of_day(value):
    """Zero-pad the hour of a valid ``H:MM``/``HH:MM`` time, e.g. '7:30' -> '07:30'."""
    hour, minute = value.split(':')
    return f'{int(hour):02d}:{minute}'
