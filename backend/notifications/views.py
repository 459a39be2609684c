from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from core_backend.base import BaseViewSet
from .models import Notification
from .serializers import NotificationRecipientSerializer, NotificationSerializer, RecipientSerializer
from .services import NotificationService


class NotificationViewSet(BaseViewSet):
    """
    Business notifications. Recipients leave a notification with
    ``remove-recipient``; ``read`` and ``mark-deleted`` flag one delivery.
    """
    queryset = Notification.objects.all()
    serializer_class = NotificationSerializer
    filterset_fields = {
        "business": ["exact"],
        "notification_type": ["exact"],
        "day_reference_number": ["exact"],
        "recipients__employee": ["exact"],
        "recipients__customer": ["exact"],
    }
    search_fields = ["message"]
    ordering = ["-created_at"]

    def _recipient(self, request):
        serializer = RecipientSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    @action(detail=True, methods=["post"], url_path="remove-recipient")
    def remove_recipient(self, request, pk=None):
        NotificationService.remove_recipient(self.get_object(), **self._recipient(request))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["patch"])
    def read(self, request, pk=None):
        delivery = NotificationService.mark_read(self.get_object(), **self._recipient(request))
        return Response(NotificationRecipientSerializer(delivery).data)

    @action(detail=True, methods=["patch"], url_path="mark-deleted")
    def mark_deleted(self, request, pk=None):
        delivery = NotificationService.mark_deleted(self.get_object(), **self._recipient(request))
        return Response(NotificationRecipientSerializer(delivery).data)
