from rest_framework import serializers

from core_backend.base import BaseModelSerializer
from goods.models import BusinessGood
from .models import Promotion
from .services import PromotionService


class PromotionSerializer(BaseModelSerializer):
    """
    Promotions. ``promotion_type`` is a one-key object such as
    ``{"discountPercent": 50}`` or ``{"twoForOne": true}``.
    """
    business_goods_to_apply = serializers.PrimaryKeyRelatedField(
        many=True, queryset=BusinessGood.objects.all(), required=False
    )

    class Meta:
        model = Promotion
        fields = [
            "id",
            "business",
            "promotion_name",
            "period_start",
            "period_end",
            "week_days",
            "active_promotion",
            "promotion_type",
            "business_goods_to_apply",
            "description",
            "created_at",
            "updated_at",
        ]
        prefetch_related_fields = ["business_goods_to_apply"]
        # Duplicate names are reported as 409 by PromotionService
        validators = []

    def create(self, validated_data):
        business_goods = validated_data.pop("business_goods_to_apply", None)
        return PromotionService.create_promotion(validated_data, business_goods=business_goods)

    def update(self, instance, validated_data):
        business_goods = validated_data.pop("business_goods_to_apply", None)
        return PromotionService.update_promotion(instance, validated_data, business_goods=business_goods)
