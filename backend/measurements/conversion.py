"""
Unit conversion between measurement units of the same family.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from core_backend.exceptions import ValidationError
from .units import UNIT_TABLE, UNIT_STRING_MAPPINGS, MeasurementUnit

logger = logging.getLogger(__name__)


class ConversionError(ValidationError):
    """Raised when a quantity cannot be converted between two units."""

    def __init__(self, from_unit, to_unit, message=None):
        self.from_unit = from_unit
        self.to_unit = to_unit
        if message is None:
            message = f"Cannot convert from '{from_unit}' to '{to_unit}'"
        super().__init__(message)


class ConversionService:
    """
    Converts quantities using the standard unit table.

    Conversions go through the family's base unit without intermediate
    rounding, so converting A -> B -> A returns the original quantity.
    Rounding, when wanted, is applied once with ``precision``.
    """

    @staticmethod
    def normalize_unit(unit) -> str:
        """
        Map a unit string to its canonical code.

        Raises:
            ConversionError: If the unit is unknown.
        """
        if isinstance(unit, MeasurementUnit):
            return unit.value
        code = str(unit or "").strip()
        if code in UNIT_TABLE:
            return code
        mapped = UNIT_STRING_MAPPINGS.get(code.lower())
        if mapped:
            return mapped
        if code.lower() in UNIT_TABLE:
            return code.lower()
        raise ConversionError(from_unit=unit, to_unit=None, message=f"Unknown measurement unit '{unit}'")

    @staticmethod
    def convert(quantity, from_unit, to_unit, precision=None) -> Decimal:
        """
        Convert a quantity from one unit to another.

        Args:
            quantity: The quantity to convert.
            from_unit: The source unit code.
            to_unit: The target unit code.
            precision: Optional decimal places to round the result to.

        Returns:
            The converted quantity as a Decimal.

        Raises:
            ConversionError: If either unit is unknown or the units belong to
                different families (e.g. kg to ml).
        """
        quantity = Decimal(str(quantity))
        source = ConversionService.normalize_unit(from_unit)
        target = ConversionService.normalize_unit(to_unit)

        if source == target:
            result = quantity
        else:
            source_category, source_size = UNIT_TABLE[source]
            target_category, target_size = UNIT_TABLE[target]
            if source_category != target_category:
                logger.warning(f"Rejected conversion {quantity} {source} -> {target}")
                raise ConversionError(from_unit=source, to_unit=target)
            result = quantity * source_size / target_size

        if precision is not None:
            result = result.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
        return result

    @staticmethod
    def same_family(unit_a, unit_b) -> bool:
        a = UNIT_TABLE[ConversionService.normalize_unit(unit_a)][0]
        b = UNIT_TABLE[ConversionService.normalize_unit(unit_b)][0]
        return a == b
