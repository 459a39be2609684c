from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_nested import routers as nested_routers
from .views import PrintConfigurationViewSet, PrinterViewSet

app_name = "printers"

router = DefaultRouter()
router.register(r"printers", PrinterViewSet, basename="printer")

printers_router = nested_routers.NestedSimpleRouter(router, r"printers", lookup="printer")
printers_router.register(r"configurations", PrintConfigurationViewSet, basename="printer-configuration")

urlpatterns = [
    path("", include(printers_router.urls)),
    path("", include(router.urls)),
]
