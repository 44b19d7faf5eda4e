from .errors import ConversionError
from .models import ConversionRequest, ConversionResult, TargetFormat
from .service import ConversionService

__all__ = ["ConversionError", "ConversionRequest", "ConversionResult", "ConversionService", "TargetFormat"]
