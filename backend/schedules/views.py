from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from .models import Schedule, ScheduleEntry
from .serializers import (
    ScheduleEntryInputSerializer,
    ScheduleEntrySerializer,
    ScheduleEntryUpdateSerializer,
    ScheduleSerializer,
)
from .services import ScheduleService


class ScheduleViewSet(BaseViewSet):
    """
    Daily staff schedules. Shifts are added with
    ``POST schedules/{id}/employees/`` and edited under
    ``schedules/{schedule_pk}/entries/``.
    """
    queryset = Schedule.objects.all()
    serializer_class = ScheduleSerializer
    filterset_fields = {
        "business": ["exact"],
        "date": ["exact", "gte", "lte"],
        "week_number": ["exact"],
    }
    ordering = ["-date"]

    def perform_create(self, serializer):
        data = serializer.validated_data
        serializer.instance = ScheduleService.create_schedule(
            data["business"], data["date"], comments=data.get("comments", "")
        )

    def perform_destroy(self, instance):
        ScheduleService.delete_schedule(instance)

    @action(detail=True, methods=["post"])
    def employees(self, request, pk=None):
        serializer = ScheduleEntryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = ScheduleService.add_entry(self.get_object(), **serializer.validated_data)
        return Response(ScheduleEntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class ScheduleEntryViewSet(BaseViewSet):
    queryset = ScheduleEntry.objects.all()
    serializer_class = ScheduleEntrySerializer
    ordering = ["start_time"]
    http_method_names = ["get", "patch", "delete", "head", "options"]

    def get_queryset(self):
        return super().get_queryset().filter(schedule__pk=self.kwargs["schedule_pk"])

    def partial_update(self, request, *args, **kwargs):
        serializer = ScheduleEntryUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = ScheduleService.update_entry(self.get_object(), serializer.validated_data)
        return Response(self.get_serializer(entry).data, status=status.HTTP_200_OK)

    def perform_destroy(self, instance):
        ScheduleService.remove_entry(instance)
