from rest_framework import serializers

from core_backend.base.serializers import BaseModelSerializer, TimestampedSerializer
from .models import Business, SalesPoint


class BusinessSerializer(TimestampedSerializer, BaseModelSerializer):
    password = serializers.CharField(write_only=True, min_length=6)

    class Meta:
        model = Business
        fields = [
            "id",
            "trade_name",
            "legal_name",
            "email",
            "password",
            "phone_number",
            "tax_number",
            "currency_trade",
            "subscription",
            "address",
            "contact_person",
            "image_url",
            "metrics",
            "created_at",
            "updated_at",
        ]
        # Uniqueness is checked by BusinessService so duplicates answer 409
        extra_kwargs = {
            "legal_name": {"validators": []},
            "email": {"validators": []},
            "tax_number": {"validators": []},
        }


class SalesPointSerializer(TimestampedSerializer, BaseModelSerializer):

    class Meta:
        model = SalesPoint
        fields = [
            "id",
            "business",
            "sales_point_name",
            "sales_point_type",
            "self_ordering",
            "qr_code",
            "qr_enabled",
            "qr_last_scanned",
            "printer",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["qr_code", "qr_last_scanned"]
        select_related_fields = ["business", "printer"]

    def validate(self, data):
        data = super().validate(data)
        business = data.get("business") or getattr(self.instance, "business", None)
        printer = data.get("printer")
        if printer is not None and business is not None and printer.business_id != business.pk:
            raise serializers.ValidationError({"printer": "Printer does not belong to this business."})
        return data
