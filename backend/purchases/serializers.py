from rest_framework import serializers

from business.models import Business
from core_backend.base import BaseModelSerializer
from employees.models import Employee
from suppliers.models import Supplier, SupplierGood
from .models import Purchase, PurchaseItem


class PurchaseItemSerializer(BaseModelSerializer):
    supplier_good_name = serializers.CharField(source="supplier_good.name", read_only=True)
    measurement_unit = serializers.CharField(source="supplier_good.measurement_unit", read_only=True)

    class Meta:
        model = PurchaseItem
        fields = [
            "id",
            "purchase",
            "supplier_good",
            "supplier_good_name",
            "measurement_unit",
            "quantity_purchased",
            "purchase_price",
        ]
        read_only_fields = ["purchase"]
        select_related_fields = ["supplier_good"]


class PurchaseSerializer(BaseModelSerializer):
    supplier_name = serializers.CharField(source="supplier.trade_name", read_only=True)
    items = PurchaseItemSerializer(many=True, read_only=True)

    class Meta:
        model = Purchase
        fields = [
            "id",
            "business",
            "supplier",
            "supplier_name",
            "title",
            "purchase_date",
            "purchased_by",
            "one_time_purchase",
            "receipt_id",
            "total_amount",
            "document_image_url",
            "comments",
            "items",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["business", "supplier", "one_time_purchase", "total_amount"]
        select_related_fields = ["supplier"]
        prefetch_related_fields = ["items__supplier_good"]


class PurchaseItemInputSerializer(serializers.Serializer):
    supplier_good = serializers.PrimaryKeyRelatedField(queryset=SupplierGood.objects.all())
    quantity_purchased = serializers.DecimalField(max_digits=14, decimal_places=4)
    purchase_price = serializers.DecimalField(max_digits=12, decimal_places=2)


class PurchaseItemUpdateSerializer(serializers.Serializer):
    quantity_purchased = serializers.DecimalField(max_digits=14, decimal_places=4, required=False)
    purchase_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class PurchaseCreateSerializer(serializers.Serializer):
    business = serializers.PrimaryKeyRelatedField(queryset=Business.objects.all())
    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all(), required=False, allow_null=True)
    title = serializers.CharField(required=False, allow_blank=True, max_length=255)
    purchase_date = serializers.DateField(required=False)
    purchased_by = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(), required=False, allow_null=True
    )
    receipt_id = serializers.CharField(required=False, allow_blank=True, max_length=100)
    document_image_url = serializers.URLField(required=False, allow_blank=True)
    comments = serializers.CharField(required=False, allow_blank=True)
    items = PurchaseItemInputSerializer(many=True, allow_empty=False)
