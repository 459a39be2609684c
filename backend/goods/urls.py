from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import BusinessGoodViewSet

app_name = "goods"

router = DefaultRouter()
router.register(r"business-goods", BusinessGoodViewSet, basename="business-good")

urlpatterns = [
    path("", include(router.urls)),
]
