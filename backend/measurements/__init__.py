from .units import MeasurementUnit, UnitCategory
from .conversion import ConversionService, ConversionError

__all__ = ["MeasurementUnit", "UnitCategory", "ConversionService", "ConversionError"]
