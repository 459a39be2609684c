from rest_framework import serializers

from orders.models import Order


class ChangeBillingStatusSerializer(serializers.Serializer):
    orders = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    billing_status = serializers.ChoiceField(choices=Order.BillingStatus.choices)
    comments = serializers.CharField(allow_blank=True, required=False, default="")


class ChangeOrderStatusSerializer(serializers.Serializer):
    orders = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    order_status = serializers.ChoiceField(choices=Order.OrderStatus.choices)
