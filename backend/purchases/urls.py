from django.urls import path, include
from rest_framework import routers
from rest_framework_nested import routers as nested_routers
from .views import PurchaseViewSet, PurchaseItemViewSet

app_name = "purchases"

router = routers.DefaultRouter()
router.register(r"purchases", PurchaseViewSet, basename="purchase")

purchases_router = nested_routers.NestedSimpleRouter(router, r"purchases", lookup="purchase")
purchases_router.register(r"items", PurchaseItemViewSet, basename="purchase-item")

urlpatterns = [
    path("", include(purchases_router.urls)),
    path("", include(router.urls)),
]
