import logging

from django.db import transaction

from core_backend.exceptions import NotFoundError, ValidationError
from .models import Notification, NotificationRecipient, NotificationType

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Notifications and their recipients.

    Recipients are employees or customers of the notification's business.
    Changing the recipient list adds unread deliveries for newcomers and
    drops the deliveries of those removed; everyone kept sees the
    notification as unread again.
    """

    @staticmethod
    def _check_recipients(business, employees, customers):
        if not employees and not customers:
            raise ValidationError("A notification needs at least one recipient!")
        for recipient in list(employees) + list(customers):
            if recipient.business_id != business.pk:
                raise ValidationError(f"{recipient} does not belong to this business!")

    @staticmethod
    def _check_sender(business, notification_type, sender):
        if sender is not None and sender.business_id != business.pk:
            raise ValidationError("Sender does not belong to this business!")
        if notification_type == NotificationType.MESSAGE and sender is None:
            raise ValidationError("Messages need a sender!")

    @staticmethod
    def _day_reference_number(business):
        from reports.services import DailySalesReportService
        from reports.services.daily_service import reference_number_now

        report = DailySalesReportService.get_open_report(business)
        return report.daily_reference_number if report else reference_number_now()

    @staticmethod
    @transaction.atomic
    def create_notification(data, employees=(), customers=()):
        """
        Create a notification and deliver it, unread, to every recipient.

        ``day_reference_number`` defaults to the open business day.
        """
        business = data["business"]
        if not data.get("message"):
            raise ValidationError("Message is required!")
        NotificationService._check_recipients(business, employees, customers)
        NotificationService._check_sender(business, data["notification_type"], data.get("sender"))

        data = dict(data)
        if not data.get("day_reference_number"):
            data["day_reference_number"] = NotificationService._day_reference_number(business)

        notification = Notification.objects.create(**data)
        NotificationRecipient.objects.bulk_create(
            [NotificationRecipient(notification=notification, employee=employee) for employee in set(employees)]
            + [NotificationRecipient(notification=notification, customer=customer) for customer in set(customers)]
        )
        logger.info(
            f"Notification {notification.pk} ({notification.notification_type}) sent to "
            f"{notification.recipients.count()} recipient(s)"
        )
        return notification

    @staticmethod
    @transaction.atomic
    def update_notification(notification, data, employees=None, customers=None):
        """
        Update type, message or sender and, when given, replace the
        employee or customer recipient lists.
        """
        business = notification.business
        for field in ("notification_type", "message", "sender"):
            if data.get(field) is not None and data.get(field) != "":
                setattr(notification, field, data[field])
        NotificationService._check_sender(business, notification.notification_type, notification.sender)

        deliveries = notification.recipients.all()
        current_employees = {d.employee for d in deliveries if d.employee_id}
        current_customers = {d.customer for d in deliveries if d.customer_id}
        new_employees = current_employees if employees is None else set(employees)
        new_customers = current_customers if customers is None else set(customers)
        NotificationService._check_recipients(business, new_employees, new_customers)

        notification.save()
        notification.recipients.filter(employee__in=current_employees - new_employees).delete()
        notification.recipients.filter(customer__in=current_customers - new_customers).delete()
        notification.recipients.update(read_flag=False, deleted_flag=False)
        NotificationRecipient.objects.bulk_create(
            [NotificationRecipient(notification=notification, employee=e) for e in new_employees - current_employees]
            + [NotificationRecipient(notification=notification, customer=c) for c in new_customers - current_customers]
        )
        return notification

    @staticmethod
    def _delivery(notification, employee=None, customer=None):
        if (employee is None) == (customer is None):
            raise ValidationError("Provide either an employee or a customer!")
        lookup = {"employee": employee} if employee is not None else {"customer": customer}
        delivery = notification.recipients.filter(**lookup).first()
        if delivery is None:
            raise NotFoundError(f"{employee or customer} is not a recipient of this notification!")
        return delivery

    @staticmethod
    @transaction.atomic
    def remove_recipient(notification, employee=None, customer=None):
        """Take one recipient off the notification."""
        NotificationService._delivery(notification, employee, customer).delete()
        logger.info(f"{employee or customer} removed from notification {notification.pk}")

    @staticmethod
    def mark_read(notification, employee=None, customer=None):
        delivery = NotificationService._delivery(notification, employee, customer)
        delivery.read_flag = True
        delivery.save(update_fields=["read_flag"])
        return delivery

    @staticmethod
    def mark_deleted(notification, employee=None, customer=None):
        """Hide the notification from one recipient's inbox; the delivery is kept."""
        delivery = NotificationService._delivery(notification, employee, customer)
        delivery.deleted_flag = True
        delivery.save(update_fields=["deleted_flag"])
        return delivery
