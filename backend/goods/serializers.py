from rest_framework import serializers

from core_backend.base.serializers import BaseModelSerializer, BusinessOwnedSerializerMixin
from suppliers.models import SupplierGood
from .models import BusinessGood, BusinessGoodIngredient
from .services import BusinessGoodService


class BusinessGoodIngredientSerializer(serializers.ModelSerializer):
    supplier_good = serializers.PrimaryKeyRelatedField(queryset=SupplierGood.objects.all())

    class Meta:
        model = BusinessGoodIngredient
        fields = ["supplier_good", "measurement_unit", "required_quantity", "cost_of_required_quantity"]
        read_only_fields = ["cost_of_required_quantity"]


class BusinessGoodSerializer(BusinessOwnedSerializerMixin, BaseModelSerializer):
    """
    Business goods with their composition.

    Writes accept either ``ingredients`` or ``set_menu``; ``cost_price`` and
    ``allergens`` are always derived.
    """
    ingredients = BusinessGoodIngredientSerializer(many=True, required=False)
    set_menu = serializers.PrimaryKeyRelatedField(
        many=True, queryset=BusinessGood.objects.all(), required=False
    )

    class Meta:
        model = BusinessGood
        fields = [
            "id",
            "business",
            "name",
            "keyword",
            "main_category",
            "sub_category",
            "on_menu",
            "available",
            "selling_price",
            "cost_price",
            "allergens",
            "description",
            "delivery_time",
            "image_url",
            "ingredients",
            "set_menu",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["cost_price", "allergens"]
        business_scoped_fields = ["set_menu"]
        prefetch_related_fields = ["ingredients", "set_menu"]
        # Name uniqueness is checked by BusinessGoodService so duplicates answer 409
        validators = []

    def validate(self, data):
        data = super().validate(data)
        business = data.get("business") or getattr(self.instance, "business", None)
        for ingredient in data.get("ingredients") or []:
            if business is not None and ingredient["supplier_good"].business_id != business.pk:
                raise serializers.ValidationError(
                    {"ingredients": f"{ingredient['supplier_good']} does not belong to this business."}
                )
        return data

    def create(self, validated_data):
        ingredients = validated_data.pop("ingredients", None)
        set_menu = validated_data.pop("set_menu", None)
        return BusinessGoodService.create_business_good(
            validated_data, ingredients=ingredients, set_menu=set_menu
        )

    def update(self, instance, validated_data):
        ingredients = validated_data.pop("ingredients", None)
        set_menu = validated_data.pop("set_menu", None)
        return BusinessGoodService.update_business_good(
            instance,
            validated_data,
            ingredients=ingredients,
            set_menu=set_menu,
            partial=self.partial,
        )
