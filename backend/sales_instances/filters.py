import django_filters
from core_backend.base.filters import BaseFilterSet
from .models import SalesInstance, SalesInstanceStatus


class SalesInstanceFilter(BaseFilterSet):
    """
    ``open_only`` hides closed instances, which is what the floor plan shows.
    """

    open_only = django_filters.BooleanFilter(method="filter_open_only")

    class Meta:
        model = SalesInstance
        fields = {
            "business": ["exact"],
            "daily_reference_number": ["exact"],
            "sales_point": ["exact"],
            "status": ["exact", "in"],
            "responsible_by": ["exact"],
            "opened_by": ["exact"],
            "closed_at": ["gte", "lte"],
        }

    def filter_open_only(self, queryset, name, value):
        if value:
            return queryset.exclude(status=SalesInstanceStatus.CLOSED)
        return queryset
