from rest_framework import serializers

from business.models import Business, SalesPoint
from core_backend.base import BaseModelSerializer
from employees.models import Employee
from .models import SalesGroup, SalesInstance, SalesInstanceStatus


class SalesGroupSerializer(BaseModelSerializer):
    orders = serializers.PrimaryKeyRelatedField(many=True, read_only=True)

    class Meta:
        model = SalesGroup
        fields = ["id", "order_code", "created_at", "orders"]


class SalesInstanceSerializer(BaseModelSerializer):
    sales_point_name = serializers.CharField(source="sales_point.sales_point_name", read_only=True, default=None)
    sales_groups = SalesGroupSerializer(many=True, read_only=True)

    class Meta:
        model = SalesInstance
        fields = [
            "id",
            "business",
            "daily_reference_number",
            "sales_point",
            "sales_point_name",
            "guests",
            "status",
            "opened_by",
            "opened_by_customer",
            "responsible_by",
            "closed_by",
            "closed_at",
            "client_name",
            "sales_groups",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
        select_related_fields = ["sales_point"]
        prefetch_related_fields = ["sales_groups__orders"]


class SalesInstanceCreateSerializer(serializers.Serializer):
    business = serializers.PrimaryKeyRelatedField(queryset=Business.objects.all())
    sales_point = serializers.PrimaryKeyRelatedField(queryset=SalesPoint.objects.all())
    guests = serializers.IntegerField(min_value=1)
    opened_by = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())
    status = serializers.ChoiceField(
        choices=[SalesInstanceStatus.OCCUPIED, SalesInstanceStatus.RESERVED],
        default=SalesInstanceStatus.OCCUPIED,
    )
    client_name = serializers.CharField(required=False, allow_blank=True, max_length=150)


class SalesInstanceUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[SalesInstanceStatus.OCCUPIED, SalesInstanceStatus.RESERVED], required=False
    )
    guests = serializers.IntegerField(min_value=1, required=False)
    responsible_by = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all(), required=False)
    client_name = serializers.CharField(required=False, allow_blank=True, max_length=150)


class CloseSalesInstanceSerializer(serializers.Serializer):
    closed_by = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())


class TransferOrdersSerializer(serializers.Serializer):
    orders = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    from_sales_instance = serializers.PrimaryKeyRelatedField(queryset=SalesInstance.objects.all())
    to_sales_instance = serializers.PrimaryKeyRelatedField(
        queryset=SalesInstance.objects.all(), required=False, allow_null=True
    )
    sales_point = serializers.PrimaryKeyRelatedField(
        queryset=SalesPoint.objects.all(), required=False, allow_null=True
    )
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all(), required=False, allow_null=True)

    def validate(self, data):
        data = super().validate(data)
        if bool(data.get("to_sales_instance")) == bool(data.get("sales_point")):
            raise serializers.ValidationError("Provide either to_sales_instance or sales_point.")
        return data
