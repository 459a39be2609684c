from rest_framework import serializers

from core_backend.base import BaseModelSerializer
from customers.models import Customer
from employees.models import Employee
from goods.models import BusinessGood
from orders.models import Order, OrderGood
from sales_instances.models import SalesInstance


class OrderGoodSerializer(serializers.ModelSerializer):

    class Meta:
        model = OrderGood
        fields = ["business_good", "quantity"]


class OrderSerializer(BaseModelSerializer):
    lines = OrderGoodSerializer(many=True, read_only=True)
    order_code = serializers.CharField(source="sales_group.order_code", read_only=True, default=None)

    class Meta:
        model = Order
        fields = [
            "id",
            "business",
            "daily_reference_number",
            "billing_status",
            "order_status",
            "order_gross_price",
            "order_net_price",
            "order_cost_price",
            "order_tips",
            "business_goods",
            "lines",
            "created_by",
            "customer",
            "sales_instance",
            "sales_group",
            "order_code",
            "payment_methods",
            "allergens",
            "promotion_applied",
            "discount_percentage",
            "comments",
            "created_at",
            "updated_at",
        ]
        # Orders are written through the service actions only.
        read_only_fields = fields
        select_related_fields = ["sales_group"]
        prefetch_related_fields = ["business_goods", "lines"]


class OrderInputSerializer(serializers.Serializer):
    """One order of a batch: the goods sold together."""

    business_goods = serializers.PrimaryKeyRelatedField(queryset=BusinessGood.objects.all(), many=True)
    promotion_applied = serializers.CharField(required=False, allow_blank=True, max_length=150)
    order_net_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    allergens = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    comments = serializers.CharField(required=False, allow_blank=True)

    def validate_business_goods(self, value):
        if not value:
            raise serializers.ValidationError("At least one business good is required.")
        return value


class OrderCreateSerializer(serializers.Serializer):
    sales_instance = serializers.PrimaryKeyRelatedField(queryset=SalesInstance.objects.all())
    created_by = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all(), required=False, allow_null=True)
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False, allow_null=True)
    orders = OrderInputSerializer(many=True, allow_empty=False)

    def validate(self, data):
        data = super().validate(data)
        if not data.get("created_by") and not data.get("customer"):
            raise serializers.ValidationError("Either an employee or a customer must create the orders.")
        return data


class CloseOrdersSerializer(serializers.Serializer):
    orders = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    # Entries are checked by validate_payment_methods in the service.
    payment_methods = serializers.ListField(child=serializers.DictField(), allow_empty=True)
