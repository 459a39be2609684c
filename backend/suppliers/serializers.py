from rest_framework import serializers

from core_backend.base.serializers import BaseModelSerializer, BusinessOwnedSerializerMixin
from .models import Allergen, Supplier, SupplierGood


class SupplierSerializer(BaseModelSerializer):

    class Meta:
        model = Supplier
        fields = [
            "id",
            "business",
            "trade_name",
            "legal_name",
            "email",
            "phone_number",
            "tax_number",
            "currently_in_use",
            "address",
            "contact_person",
            "image_url",
            "created_at",
            "updated_at",
        ]


class SupplierGoodSerializer(BusinessOwnedSerializerMixin, BaseModelSerializer):
    allergens = serializers.ListField(
        child=serializers.ChoiceField(choices=Allergen.choices), required=False
    )

    class Meta:
        model = SupplierGood
        fields = [
            "id",
            "business",
            "supplier",
            "name",
            "keyword",
            "main_category",
            "sub_category",
            "description",
            "currently_in_use",
            "allergens",
            "budget_impact",
            "inventory_schedule",
            "measurement_unit",
            "price_per_measurement_unit",
            "par_level",
            "minimum_quantity_required",
            "image_url",
            "created_at",
            "updated_at",
        ]
        business_scoped_fields = ["supplier"]
        select_related_fields = ["supplier"]
