from core_backend.base import BaseViewSet
from .models import BusinessGood
from .serializers import BusinessGoodSerializer
from .services import BusinessGoodService


class BusinessGoodViewSet(BaseViewSet):
    queryset = BusinessGood.objects.all()
    serializer_class = BusinessGoodSerializer
    filterset_fields = ["business", "main_category", "on_menu", "available"]
    search_fields = ["name", "keyword"]
    ordering = ["name"]

    def perform_destroy(self, instance):
        BusinessGoodService.delete_business_good(instance)
