# 💱 currency_engine/domain/currency/__init__.py
"""
💱 Пакет `domain.currency`: контракти, валідатор і політика точності.

🔹 `interfaces.py` — `CurrencyCode`, `ValidationResult`, `ConversionResult`, протоколи DI.
🔹 `validation.py` — чистий валідатор вхідних даних.
🔹 `precision.py` — вибір кількості знаків і квантування.
"""

from .interfaces import (
    ConversionResult,
    CurrencyCode,
    ErrorType,
    IConversionService,
    IRateSource,
    IRatesProvider,
    Severity,
    ValidationResult,
)
from .precision import normalize_rounding, precision_for_amount, quantize, select_precision
from .validation import CurrencyInputValidator, validate

# ================================
# 📤 ПУБЛІЧНИЙ API ПАКЕТА
# ================================
__all__ = [
    "ConversionResult",
    "CurrencyCode",
    "ErrorType",
    "IConversionService",
    "IRateSource",
    "IRatesProvider",
    "Severity",
    "ValidationResult",
    "CurrencyInputValidator",
    "validate",
    "normalize_rounding",
    "precision_for_amount",
    "quantize",
    "select_precision",
]
