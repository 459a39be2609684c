from rest_framework import serializers

from business.models import SalesPoint
from core_backend.base.serializers import BaseModelSerializer, BusinessOwnedSerializerMixin
from employees.models import Employee
from suppliers.models import MainCategory
from .models import PrintConfiguration, Printer


class PrinterSerializer(BusinessOwnedSerializerMixin, BaseModelSerializer):
    active_target = serializers.SerializerMethodField()

    class Meta:
        model = Printer
        fields = [
            "id",
            "business",
            "printer_alias",
            "description",
            "ip_address",
            "port",
            "connected",
            "backup_printer",
            "active_target",
            "created_at",
            "updated_at",
        ]
        business_scoped_fields = ["backup_printer"]
        select_related_fields = ["backup_printer"]

    def get_active_target(self, obj):
        return obj.resolve_target().pk

    def validate(self, data):
        data = super().validate(data)
        backup = data.get("backup_printer")
        if backup is not None and self.instance is not None and backup.pk == self.instance.pk:
            raise serializers.ValidationError({"backup_printer": "A printer cannot back up itself."})
        return data


class PrintConfigurationSerializer(BaseModelSerializer):

    class Meta:
        model = PrintConfiguration
        fields = [
            "id",
            "printer",
            "main_category",
            "sub_categories",
            "sales_points",
            "excluded_employees",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
        prefetch_related_fields = ["sales_points", "excluded_employees"]


class PrintConfigurationInputSerializer(serializers.Serializer):
    main_category = serializers.ChoiceField(choices=MainCategory.choices)
    sub_categories = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    sales_points = serializers.PrimaryKeyRelatedField(queryset=SalesPoint.objects.all(), many=True)
    excluded_employees = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(), many=True, required=False, default=list
    )


class RouteOrderSerializer(serializers.Serializer):
    order = serializers.IntegerField()
