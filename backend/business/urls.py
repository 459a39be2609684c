from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import BusinessViewSet, SalesPointViewSet

app_name = "business"

router = DefaultRouter()
router.register(r"businesses", BusinessViewSet, basename="business")
router.register(r"sales-points", SalesPointViewSet, basename="sales-point")

urlpatterns = [
    path("", include(router.urls)),
]
