from rest_framework import serializers
from rest_framework.validators import UniqueTogetherValidator

from core_backend.base.serializers import BaseModelSerializer
from .models import Customer


class CustomerSerializer(BaseModelSerializer):
    password = serializers.CharField(write_only=True, required=False, min_length=6)

    class Meta:
        model = Customer
        fields = [
            "id",
            "business",
            "customer_name",
            "email",
            "password",
            "phone_number",
            "id_type",
            "id_number",
            "address",
            "image_url",
            "created_at",
            "updated_at",
        ]
        validators = [
            UniqueTogetherValidator(
                queryset=Customer.objects.all(),
                fields=["business", "email"],
                message="Customer with this email already exists for this business.",
            )
        ]

    def validate_email(self, value):
        return Customer.objects.normalize_email(value)

    def create(self, validated_data):
        return Customer.objects.create_customer(**validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop("password", None)
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=["password", "updated_at"])
        return instance
