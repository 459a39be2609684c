from rest_framework import serializers

from core_backend.base.serializers import BaseModelSerializer
from .models import Employee, EmployeeRole


class EmployeeSerializer(BaseModelSerializer):
    roles = serializers.ListField(child=serializers.ChoiceField(choices=EmployeeRole.choices))

    class Meta:
        model = Employee
        fields = [
            "id",
            "business",
            "employee_name",
            "email",
            "phone_number",
            "id_type",
            "id_number",
            "tax_number",
            "roles",
            "current_shift_role",
            "address",
            "image_url",
            "join_date",
            "terminated_date",
            "active",
            "on_duty",
            "vacation_days_per_year",
            "vacation_days_left",
            "contract_hours_week",
            "pay_frequency",
            "gross_salary",
            "net_salary",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["vacation_days_left"]
        # Uniqueness is checked by EmployeeService so duplicates answer 409
        validators = []
