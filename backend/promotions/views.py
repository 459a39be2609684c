from core_backend.base import BaseViewSet
from .filters import PromotionFilter
from .models import Promotion
from .serializers import PromotionSerializer


class PromotionViewSet(BaseViewSet):
    queryset = Promotion.objects.all()
    serializer_class = PromotionSerializer
    filterset_class = PromotionFilter
    search_fields = ["promotion_name", "description"]
    ordering = ["-period_start"]
