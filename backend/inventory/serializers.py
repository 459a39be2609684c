from rest_framework import serializers

from core_backend.base.serializers import BaseModelSerializer
from employees.models import Employee
from suppliers.models import SupplierGood
from .models import Inventory, InventoryCount, InventoryGood


class InventoryCountSerializer(BaseModelSerializer):

    class Meta:
        model = InventoryCount
        fields = [
            "id",
            "counted_date",
            "current_count_quantity",
            "system_count_at_count",
            "quantity_needed",
            "counted_by",
            "deviation_percent",
            "comments",
            "reedited",
        ]
        read_only_fields = fields


class InventoryGoodSerializer(BaseModelSerializer):
    supplier_good_name = serializers.CharField(source="supplier_good.name", read_only=True)
    measurement_unit = serializers.CharField(source="supplier_good.measurement_unit", read_only=True)
    par_level = serializers.DecimalField(
        source="supplier_good.par_level", max_digits=12, decimal_places=4, read_only=True
    )
    monthly_counts = InventoryCountSerializer(many=True, read_only=True)

    class Meta:
        model = InventoryGood
        fields = [
            "id",
            "inventory",
            "supplier_good",
            "supplier_good_name",
            "measurement_unit",
            "par_level",
            "dynamic_system_count",
            "average_deviation_percent",
            "monthly_counts",
        ]
        read_only_fields = ["inventory", "supplier_good", "dynamic_system_count", "average_deviation_percent"]
        select_related_fields = ["supplier_good"]
        prefetch_related_fields = ["monthly_counts"]


class InventorySerializer(BaseModelSerializer):
    inventory_goods = InventoryGoodSerializer(many=True, read_only=True)

    class Meta:
        model = Inventory
        fields = ["id", "business", "period", "set_final_count", "inventory_goods", "created_at", "updated_at"]
        read_only_fields = ["period", "set_final_count"]
        prefetch_related_fields = ["inventory_goods__supplier_good", "inventory_goods__monthly_counts"]


class AddInventoryGoodSerializer(serializers.Serializer):
    supplier_good = serializers.PrimaryKeyRelatedField(queryset=SupplierGood.objects.all())


class AddCountSerializer(serializers.Serializer):
    current_count_quantity = serializers.DecimalField(max_digits=14, decimal_places=4, min_value=0)
    counted_by = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(), required=False, allow_null=True
    )
    comments = serializers.CharField(required=False, allow_blank=True, default="")


class ReeditCountSerializer(AddCountSerializer):
    reason = serializers.CharField()
    comments = serializers.CharField(required=False, allow_blank=True)
