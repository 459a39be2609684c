from core_backend.base import BaseViewSet
from .models import Employee
from .serializers import EmployeeSerializer
from .services import EmployeeService


class EmployeeViewSet(BaseViewSet):
    queryset = Employee.objects.all()
    serializer_class = EmployeeSerializer
    filterset_fields = ["business", "active", "on_duty", "pay_frequency"]
    search_fields = ["employee_name", "email"]
    ordering = ["employee_name"]

    def perform_create(self, serializer):
        serializer.instance = EmployeeService.create_employee(serializer.validated_data)

    def perform_update(self, serializer):
        serializer.instance = EmployeeService.update_employee(
            serializer.instance, serializer.validated_data
        )
