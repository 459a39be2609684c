from django.db import models
from django.utils.translation import gettext_lazy as _


class WeekDay(models.TextChoices):
    MONDAY = "Monday", _("Monday")
    TUESDAY = "Tuesday", _("Tuesday")
    WEDNESDAY = "Wednesday", _("Wednesday")
    THURSDAY = "Thursday", _("Thursday")
    FRIDAY = "Friday", _("Friday")
    SATURDAY = "Saturday", _("Saturday")
    SUNDAY = "Sunday", _("Sunday")


# Promotion type key -> accepted value kind
PROMOTION_TYPES = {
    "fixedPrice": "number",
    "discountPercent": "number",
    "twoForOne": "boolean",
    "threeForTwo": "boolean",
    "secondHalfPrice": "boolean",
    "fullComplimentary": "boolean",
}


class Promotion(models.Model):
    """
    A time-boxed offer, e.g. "all beers 2.00 from 15:00 to 17:00 on Fridays".

    ``promotion_type`` holds exactly one key of PROMOTION_TYPES with its value.
    """
    business = models.ForeignKey("business.Business", on_delete=models.CASCADE, related_name="promotions")
    promotion_name = models.CharField(max_length=150)
    period_start = models.DateTimeField()
    period_end = models.DateTimeField()
    week_days = models.JSONField(default=list)
    active_promotion = models.BooleanField(default=True)
    promotion_type = models.JSONField(default=dict)
    business_goods_to_apply = models.ManyToManyField(
        "goods.BusinessGood", related_name="promotions", blank=True
    )
    description = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Promotion")
        verbose_name_plural = _("Promotions")
        ordering = ["-period_start"]
        constraints = [
            models.UniqueConstraint(fields=["business", "promotion_name"], name="unique_promotion_name_per_business"),
        ]

    def __str__(self):
        return self.promotion_name
