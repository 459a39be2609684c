from django.urls import path, include
from rest_framework import routers
from rest_framework_nested import routers as nested_routers
from .views import ScheduleViewSet, ScheduleEntryViewSet

app_name = "schedules"

router = routers.DefaultRouter()
router.register(r"schedules", ScheduleViewSet, basename="schedule")

schedules_router = nested_routers.NestedSimpleRouter(router, r"schedules", lookup="schedule")
schedules_router.register(r"entries", ScheduleEntryViewSet, basename="schedule-entry")

urlpatterns = [
    path("", include(schedules_router.urls)),
    path("", include(router.urls)),
]
