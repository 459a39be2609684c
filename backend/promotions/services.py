import logging
from decimal import Decimal

from django.db import transaction

from core_backend.exceptions import ConflictError, ValidationError
from .models import PROMOTION_TYPES, Promotion, WeekDay

logger = logging.getLogger(__name__)


def validate_promotion_period(start, end):
    if start is None or end is None:
        raise ValidationError("The promotion period must have a start and end valid date!")
    if start >= end:
        raise ValidationError("The start date must be before the end date.")


def validate_week_days(week_days):
    if not isinstance(week_days, list) or not week_days:
        raise ValidationError("Week days is required and must be an array of days of the week!")
    invalid = [day for day in week_days if day not in WeekDay.values]
    if invalid:
        raise ValidationError(f"Invalid day(s) in the week days array: {', '.join(map(str, invalid))}")
    return list(dict.fromkeys(week_days))


def validate_promotion_type(promotion_type):
    """Exactly one known key, numbers for prices and percents, booleans for the rest."""
    if not isinstance(promotion_type, dict):
        raise ValidationError("Promotion type is a required object!")
    if len(promotion_type) != 1:
        raise ValidationError("Promotion type must have only one key and one value!")

    key, value = next(iter(promotion_type.items()))
    expected = PROMOTION_TYPES.get(key)
    if expected is None:
        raise ValidationError("Invalid promotion type key!")
    if expected == "boolean":
        valid = isinstance(value, bool)
    else:
        valid = isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)
    if not valid:
        raise ValidationError(f"Invalid type for {key}. Expected {expected}.")
    return promotion_type


class PromotionService:

    @staticmethod
    def _check_name(business, name, exclude_id=None):
        duplicates = Promotion.objects.filter(business=business, promotion_name=name)
        if exclude_id is not None:
            duplicates = duplicates.exclude(pk=exclude_id)
        if duplicates.exists():
            raise ConflictError(f"Promotion {name} already exists!")

    @staticmethod
    def _check_goods(business, business_goods):
        foreign = [good for good in business_goods if good.business_id != business.pk]
        if foreign:
            raise ValidationError(f"Business good(s) {', '.join(map(str, foreign))} do not belong to this business!")

    @staticmethod
    @transaction.atomic
    def create_promotion(data, business_goods=None):
        data = dict(data)
        business = data["business"]
        validate_promotion_period(data.get("period_start"), data.get("period_end"))
        data["week_days"] = validate_week_days(data.get("week_days"))
        validate_promotion_type(data.get("promotion_type"))
        PromotionService._check_name(business, data["promotion_name"])
        business_goods = business_goods or []
        PromotionService._check_goods(business, business_goods)

        promotion = Promotion.objects.create(**data)
        promotion.business_goods_to_apply.set(business_goods)
        logger.info(f"Promotion {promotion.promotion_name} created for business {business.pk}")
        return promotion

    @staticmethod
    @transaction.atomic
    def update_promotion(promotion, data, business_goods=None):
        data = dict(data)
        data.pop("business", None)
        validate_promotion_period(
            data.get("period_start", promotion.period_start), data.get("period_end", promotion.period_end)
        )
        if "week_days" in data:
            data["week_days"] = validate_week_days(data["week_days"])
        if "promotion_type" in data:
            validate_promotion_type(data["promotion_type"])
        if "promotion_name" in data:
            PromotionService._check_name(promotion.business, data["promotion_name"], exclude_id=promotion.pk)

        for field, value in data.items():
            setattr(promotion, field, value)
        promotion.save()
        if business_goods is not None:
            PromotionService._check_goods(promotion.business, business_goods)
            promotion.business_goods_to_apply.set(business_goods)
        return promotion
