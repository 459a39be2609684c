from .costing import (
    GoodsCostCalculator,
    IngredientExpander,
    CyclicSetMenuError,
    GoodCostBreakdown,
    ConsumedQuantity,
)
from .business_good_service import BusinessGoodService

__all__ = [
    "GoodsCostCalculator",
    "IngredientExpander",
    "CyclicSetMenuError",
    "GoodCostBreakdown",
    "ConsumedQuantity",
    "BusinessGoodService",
]
