from django.urls import path, include
from rest_framework import routers
from .views import SalesInstanceViewSet

app_name = "sales_instances"

router = routers.DefaultRouter()
router.register(r"sales-instances", SalesInstanceViewSet, basename="sales-instance")

urlpatterns = [
    path("", include(router.urls)),
]
