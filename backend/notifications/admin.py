from django.contrib import admin
from .models import Notification, NotificationRecipient


class NotificationRecipientInline(admin.TabularInline):
    model = NotificationRecipient
    extra = 0


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("notification_type", "business", "day_reference_number", "sender", "created_at")
    list_filter = ("notification_type",)
    search_fields = ("message",)
    inlines = [NotificationRecipientInline]
