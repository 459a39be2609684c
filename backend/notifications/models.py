from django.db import models
from django.utils.translation import gettext_lazy as _


class NotificationType(models.TextChoices):
    WARNING = "Warning", _("Warning")
    EMERGENCY = "Emergency", _("Emergency")
    INFO = "Info", _("Info")
    MESSAGE = "Message", _("Message")


class Notification(models.Model):
    """
    A message sent inside a business to employees and customers, e.g. a
    supplier good running low or a note from the manager.
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="notifications")
    day_reference_number = models.BigIntegerField()
    notification_type = models.CharField(max_length=12, choices=NotificationType.choices)
    message = models.TextField()
    sender = models.ForeignKey(
        "employees.Employee", on_delete=models.SET_NULL, null=True, blank=True, related_name="sent_notifications"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [models.Index(fields=["business", "day_reference_number"])]

    def __str__(self):
        return f"{self.notification_type}: {self.message[:40]}"


class NotificationRecipient(models.Model):
    """Delivery of a notification to one employee or one customer."""

    notification = models.ForeignKey(Notification, on_delete=models.CASCADE, related_name="recipients")
    employee = models.ForeignKey(
        "employees.Employee", on_delete=models.CASCADE, null=True, blank=True, related_name="notifications"
    )
    customer = models.ForeignKey(
        "customers.Customer", on_delete=models.CASCADE, null=True, blank=True, related_name="notifications"
    )
    read_flag = models.BooleanField(default=False)
    deleted_flag = models.BooleanField(default=False)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["notification", "employee"], name="unique_employee_recipient"),
            models.UniqueConstraint(fields=["notification", "customer"], name="unique_customer_recipient"),
        ]

    def __str__(self):
        return f"{self.employee or self.customer} <- notification {self.notification_id}"
