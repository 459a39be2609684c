from rest_framework import serializers

from core_backend.base import BaseModelSerializer, BusinessOwnedSerializerMixin
from customers.models import Customer
from employees.models import Employee
from .models import Notification, NotificationRecipient
from .services import NotificationService


class NotificationRecipientSerializer(serializers.ModelSerializer):

    class Meta:
        model = NotificationRecipient
        fields = ["id", "employee", "customer", "read_flag", "deleted_flag"]
        read_only_fields = fields


class NotificationSerializer(BusinessOwnedSerializerMixin, BaseModelSerializer):
    employees = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(), many=True, required=False, write_only=True
    )
    customers = serializers.PrimaryKeyRelatedField(
        queryset=Customer.objects.all(), many=True, required=False, write_only=True
    )
    recipients = NotificationRecipientSerializer(many=True, read_only=True)

    class Meta:
        model = Notification
        fields = [
            "id",
            "business",
            "day_reference_number",
            "notification_type",
            "message",
            "sender",
            "employees",
            "customers",
            "recipients",
            "created_at",
            "updated_at",
        ]
        extra_kwargs = {"day_reference_number": {"required": False}}
        business_scoped_fields = ["sender", "employees", "customers"]
        select_related_fields = ["sender"]
        prefetch_related_fields = ["recipients"]

    def create(self, validated_data):
        employees = validated_data.pop("employees", [])
        customers = validated_data.pop("customers", [])
        return NotificationService.create_notification(validated_data, employees=employees, customers=customers)

    def update(self, instance, validated_data):
        employees = validated_data.pop("employees", None)
        customers = validated_data.pop("customers", None)
        return NotificationService.update_notification(
            instance, validated_data, employees=employees, customers=customers
        )


class RecipientSerializer(serializers.Serializer):
    """Exactly one of ``employee`` or ``customer``."""

    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all(), required=False)
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all(), required=False)
