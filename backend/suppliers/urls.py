from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import SupplierViewSet, SupplierGoodViewSet

app_name = "suppliers"

router = DefaultRouter()
router.register(r"suppliers", SupplierViewSet, basename="supplier")
router.register(r"supplier-goods", SupplierGoodViewSet, basename="supplier-good")

urlpatterns = [
    path("", include(router.urls)),
]
