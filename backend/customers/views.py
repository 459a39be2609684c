from core_backend.base import BaseViewSet
from .models import Customer
from .serializers import CustomerSerializer


class CustomerViewSet(BaseViewSet):
    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    filterset_fields = ["business"]
    search_fields = ["customer_name", "email", "phone_number"]
    ordering = ["customer_name"]
