import django_filters
from django.db import models
from django.utils import timezone
from django.utils.dateparse import parse_datetime, parse_date
from datetime import datetime, time


def normalize_datetime_value(value, *, is_end=False):
    """
    Normalize a date or datetime value to a timezone-aware datetime.

    Date-only inputs expand to the start of the day, or to its last instant
    when ``is_end`` is set, so "2025-11-11" filters as a full-day range.
    """
    if not value:
        return value

    if isinstance(value, datetime):
        return timezone.make_aware(value) if timezone.is_naive(value) else value

    if isinstance(value, str):
        dt = parse_datetime(value)
        if dt:
            return timezone.make_aware(dt) if timezone.is_naive(dt) else dt
        value = parse_date(value)
        if value is None:
            return None

    bound = time.max if is_end else time.min
    return timezone.make_aware(datetime.combine(value, bound))


class FlexibleDateTimeFilter(django_filters.DateTimeFilter):
    """DateTimeFilter accepting date-only values for range lookups."""

    def filter(self, qs, value):
        if value in (None, ""):
            return qs
        is_end = self.lookup_expr in ("lte", "lt")
        return super().filter(qs, normalize_datetime_value(value, is_end=is_end))


class BaseFilterSet(django_filters.FilterSet):
    """
    Base filter set with common filtering patterns.

    All DateTimeField filters accept date-only inputs.
    """

    created_after = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='gte')
    created_before = FlexibleDateTimeFilter(field_name='created_at', lookup_expr='lte')

    @classmethod
    def filter_for_field(cls, field, field_name, lookup_expr='exact'):
        if isinstance(field, models.DateTimeField):
            return FlexibleDateTimeFilter(field_name=field_name, lookup_expr=lookup_expr)
        return super().filter_for_field(field, field_name, lookup_expr)

    class Meta:
        abstract = True
