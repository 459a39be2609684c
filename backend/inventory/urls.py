from django.urls import path, include
from rest_framework import routers
from rest_framework_nested import routers as nested_routers
from .views import InventoryViewSet, InventoryGoodViewSet, InventoryCountViewSet

app_name = "inventory"

router = routers.DefaultRouter()
router.register(r"inventories", InventoryViewSet, basename="inventory")

inventories_router = nested_routers.NestedSimpleRouter(router, r"inventories", lookup="inventory")
inventories_router.register(r"goods", InventoryGoodViewSet, basename="inventory-good")

goods_router = nested_routers.NestedSimpleRouter(inventories_router, r"goods", lookup="good")
goods_router.register(r"counts", InventoryCountViewSet, basename="inventory-count")

urlpatterns = [
    # Nested routes first for precedence.
    path("", include(goods_router.urls)),
    path("", include(inventories_router.urls)),
    path("", include(router.urls)),
]
