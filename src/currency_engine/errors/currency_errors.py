# 🚨 currency_engine/errors/currency_errors.py
"""
🚨 Ієрархія помилок сервісу курсів.

🔹 `AppError` — базовий виняток застосунку з `details` та `to_log_extra()`.
🔹 `CurrencyServiceError` — збій резолвера курсів; кожен підклас має фіксоване
    повідомлення, категорію (`ErrorType`) і важливість (`Severity`).
🔹 Конвертер перетворює ці винятки на `ConversionResult(success=False, error=...)`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import ClassVar, Dict, Optional

# 🧩 Внутрішні модулі проєкту
from currency_engine.domain.currency.interfaces import ErrorType, Severity
from currency_engine.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)


# ================================
# 🧠 БАЗА
# ================================
class AppError(Exception):
    """🧠 Базова помилка застосунку."""

    def __init__(self, message: str, *, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_log_extra(self) -> Dict[str, object]:
        """📦 Словник для `logger.*(..., extra=...)`."""
        extra: Dict[str, object] = {"error_class": type(self).__name__}
        if self.details:
            extra["details"] = self.details
        return extra


# ================================
# 📡 ПОМИЛКИ РЕЗОЛВЕРА КУРСІВ
# ================================
class CurrencyServiceError(AppError):
    """📡 Збій отримання курсу. Повідомлення показується користувачу як є."""

    default_message: ClassVar[str] = "Currency service error"
    error_type: ClassVar[ErrorType] = ErrorType.SERVICE
    severity: ClassVar[Severity] = Severity.MEDIUM

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message or self.default_message, details=details)
        self.status_code = status_code

    def to_log_extra(self) -> Dict[str, object]:
        extra = super().to_log_extra()
        extra["error_type"] = self.error_type.value
        extra["severity"] = self.severity.value
        if self.status_code is not None:
            extra["status_code"] = self.status_code
        return extra


class RateTimeoutError(CurrencyServiceError):
    default_message = "Request timeout - please try again"
    error_type = ErrorType.NETWORK
    severity = Severity.MEDIUM


class RateNetworkError(CurrencyServiceError):
    default_message = "Network error - check your connection"
    error_type = ErrorType.NETWORK
    severity = Severity.HIGH


class RateLimitExceededError(CurrencyServiceError):
    default_message = "Rate limit exceeded - please wait"
    error_type = ErrorType.RATE_LIMIT
    severity = Severity.MEDIUM


class RateServerError(CurrencyServiceError):
    default_message = "Server error - please try again later"
    error_type = ErrorType.SERVER
    severity = Severity.HIGH


class InvalidRateResponseError(CurrencyServiceError):
    default_message = "Invalid response from currency service"
    error_type = ErrorType.SERVICE
    severity = Severity.MEDIUM


class RateNotFoundError(CurrencyServiceError):
    """🔍 Джерело відповіло, але потрібної пари в знімку немає."""

    error_type = ErrorType.SERVICE
    severity = Severity.MEDIUM

    def __init__(self, from_currency: str, to_currency: str, *, details: Optional[str] = None) -> None:
        super().__init__(
            f"Exchange rate not available for {from_currency} to {to_currency}",
            details=details,
        )
        self.from_currency = from_currency
        self.to_currency = to_currency


# ================================
# 📤 ПУБЛІЧНИЙ API
# ================================
__all__ = [
    "AppError",
    "CurrencyServiceError",
    "RateTimeoutError",
    "RateNetworkError",
    "RateLimitExceededError",
    "RateServerError",
    "InvalidRateResponseError",
    "RateNotFoundError",
]
