import django_filters
from django.utils import timezone

from core_backend.base.filters import BaseFilterSet
from .models import Promotion, WeekDay

WEEK_DAYS = list(WeekDay.values)


class PromotionFilter(BaseFilterSet):
    """
    ``active_at`` keeps the active promotions whose period and week days
    cover the given moment, which is what an order taken at that time can use.
    """

    active_at = django_filters.IsoDateTimeFilter(method="filter_active_at")

    class Meta:
        model = Promotion
        fields = {
            "business": ["exact"],
            "active_promotion": ["exact"],
            "business_goods_to_apply": ["exact"],
            "period_start": ["lte"],
            "period_end": ["gte"],
        }

    def filter_active_at(self, queryset, name, value):
        if value is None:
            return queryset
        week_day = WEEK_DAYS[timezone.localtime(value).weekday()]
        candidates = queryset.filter(active_promotion=True, period_start__lte=value, period_end__gte=value)
        matching = [promotion.pk for promotion in candidates if week_day in promotion.week_days]
        return queryset.filter(pk__in=matching)
