import django_filters
from core_backend.base.filters import BaseFilterSet
from .models import Order


class OrderFilter(BaseFilterSet):
    """
    Filters for orders of one business.

    ``open_only`` narrows to orders still waiting for payment; ``business_good``
    matches orders containing that good.
    """

    open_only = django_filters.BooleanFilter(method="filter_open_only")
    business_good = django_filters.NumberFilter(field_name="business_goods__id")

    class Meta:
        model = Order
        fields = {
            "business": ["exact"],
            "daily_reference_number": ["exact"],
            "sales_instance": ["exact"],
            "sales_group": ["exact"],
            "billing_status": ["exact", "in"],
            "order_status": ["exact", "in"],
            "created_by": ["exact"],
            "customer": ["exact"],
            "created_at": ["gte", "lte"],
        }

    def filter_open_only(self, queryset, name, value):
        if value:
            return queryset.filter(billing_status=Order.BillingStatus.OPEN)
        return queryset
