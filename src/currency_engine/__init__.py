# 💱 currency_engine/__init__.py
"""
💱 currency_engine — валідація, курси та точна конвертація валют.

🔹 `convert_currency()` / `validate_currency_input()` — публічні точки входу.
🔹 `CurrencyContainer` — збирання сервісів для вбудовування у застосунок.
"""

from __future__ import annotations

from .api import (
    convert_currency,
    get_currency_service,
    set_currency_service,
    shutdown_currency_service,
    validate_currency_input,
)
from .container import CurrencyContainer
from .domain.currency.interfaces import ConversionResult, ValidationResult

__version__ = "0.1.0"

__all__ = [
    "ConversionResult",
    "CurrencyContainer",
    "ValidationResult",
    "convert_currency",
    "get_currency_service",
    "set_currency_service",
    "shutdown_currency_service",
    "validate_currency_input",
    "__version__",
]
