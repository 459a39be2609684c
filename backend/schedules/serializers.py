from rest_framework import serializers

from core_backend.base import BaseModelSerializer
from employees.models import Employee, EmployeeRole
from .models import Schedule, ScheduleEntry


class ScheduleEntrySerializer(BaseModelSerializer):
    employee_name = serializers.CharField(source="employee.employee_name", read_only=True)

    class Meta:
        model = ScheduleEntry
        fields = [
            "id",
            "schedule",
            "employee",
            "employee_name",
            "role",
            "start_time",
            "end_time",
            "vacation",
            "shift_hours",
            "week_hours_left",
            "employee_cost",
        ]
        read_only_fields = fields
        select_related_fields = ["employee"]


class ScheduleSerializer(BaseModelSerializer):
    entries = ScheduleEntrySerializer(many=True, read_only=True)

    class Meta:
        model = Schedule
        fields = [
            "id",
            "business",
            "date",
            "week_number",
            "total_employees_scheduled",
            "total_employees_vacation",
            "total_day_employees_cost",
            "comments",
            "entries",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "week_number",
            "total_employees_scheduled",
            "total_employees_vacation",
            "total_day_employees_cost",
        ]
        prefetch_related_fields = ["entries__employee"]
        # Duplicate dates are reported as 409 by the service.
        validators = []

    def update(self, instance, validated_data):
        instance.comments = validated_data.get("comments", instance.comments)
        instance.save(update_fields=["comments", "updated_at"])
        return instance


class ScheduleEntryInputSerializer(serializers.Serializer):
    employee = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())
    role = serializers.ChoiceField(choices=EmployeeRole.choices)
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    vacation = serializers.BooleanField(default=False)


class ScheduleEntryUpdateSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=EmployeeRole.choices, required=False)
    start_time = serializers.DateTimeField(required=False)
    end_time = serializers.DateTimeField(required=False)
    vacation = serializers.BooleanField(required=False)
