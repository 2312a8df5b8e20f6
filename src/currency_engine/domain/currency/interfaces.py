# 💱 currency_engine/domain/currency/interfaces.py
"""
💱 Контракти та DTO домену валютних конвертацій.

🔹 `CurrencyCode` — типобезпечний ISO-4217 код.
🔹 `ErrorType` / `Severity` — класифікація помилок для UI та тестових стендів.
🔹 `ValidationResult` / `ConversionResult` — теговані результати (без винятків на межі модуля).
🔹 `IRateSource` / `IRatesProvider` / `IConversionService` — протоколи для DI.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Protocol


# ================================
# 🔤 КОД ВАЛЮТИ
# ================================
class CurrencyCode(str):
    """🔤 Рядок, що вже пройшов валідацію (три латинські літери у верхньому регістрі)."""

    __slots__ = ()


# ================================
# 🏷️ КЛАСИФІКАЦІЯ ПОМИЛОК
# ================================
class ErrorType(str, Enum):
    TYPE = "type"
    RANGE = "range"
    FORMAT = "format"
    SECURITY = "security"
    NETWORK = "network"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    SERVICE = "service"
    SYSTEM = "system"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# ================================
# ✅ РЕЗУЛЬТАТ ВАЛІДАЦІЇ
# ================================
@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    ✅ Результат перевірки вхідних даних.

    valid=True → заповнені `amount`, `from_currency`, `to_currency`.
    valid=False → заповнені `error`, `error_type`, `severity` (і, можливо, `details`).
    """

    valid: bool
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None
    severity: Optional[Severity] = None
    details: Optional[str] = None
    amount: Optional[Decimal] = None
    from_currency: Optional[CurrencyCode] = None
    to_currency: Optional[CurrencyCode] = None

    @classmethod
    def ok(cls, amount: Decimal, from_currency: CurrencyCode, to_currency: CurrencyCode) -> "ValidationResult":
        return cls(valid=True, amount=amount, from_currency=from_currency, to_currency=to_currency)

    @classmethod
    def fail(
        cls,
        error: str,
        error_type: ErrorType,
        severity: Severity,
        details: Optional[str] = None,
    ) -> "ValidationResult":
        return cls(valid=False, error=error, error_type=error_type, severity=severity, details=details)

    def to_dict(self) -> Dict[str, Any]:
        """Серіалізація для відповіді викликачу (float замість Decimal)."""
        if self.valid:
            return {
                "valid": True,
                "sanitizedAmount": float(self.amount) if self.amount is not None else None,
                "normalizedFromCurrency": self.from_currency,
                "normalizedToCurrency": self.to_currency,
            }
        payload: Dict[str, Any] = {
            "valid": False,
            "error": self.error,
            "errorType": self.error_type.value if self.error_type else None,
            "severity": self.severity.value if self.severity else None,
        }
        if self.details:
            payload["details"] = self.details
        return payload


# ================================
# 💵 РЕЗУЛЬТАТ КОНВЕРТАЦІЇ
# ================================
@dataclass(frozen=True, slots=True)
class ConversionResult:
    """
    💵 Тегований результат конвертації.

    success=True → `converted_amount`, `exchange_rate`, `precision` присутні та скінченні.
    success=False → `error` непорожній; числовим полям не довіряємо.
    """

    success: bool
    converted_amount: Optional[Decimal] = None
    exchange_rate: Optional[Decimal] = None
    precision: Optional[int] = None
    error: Optional[str] = None
    error_type: Optional[ErrorType] = None
    severity: Optional[Severity] = None
    from_currency: Optional[str] = None
    to_currency: Optional[str] = None
    response_time_ms: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Серіалізація у форму, яку очікують UI/тестові сторінки."""
        payload: Dict[str, Any] = {
            "success": self.success,
            "responseTime": round(self.response_time_ms, 3),
        }
        if self.success:
            payload.update(
                {
                    "convertedAmount": float(self.converted_amount) if self.converted_amount is not None else None,
                    "exchangeRate": float(self.exchange_rate) if self.exchange_rate is not None else None,
                    "precision": self.precision,
                    "fromCurrency": self.from_currency,
                    "toCurrency": self.to_currency,
                    "timestamp": self.timestamp.isoformat(),
                }
            )
        else:
            payload.update(
                {
                    "error": self.error,
                    "errorType": self.error_type.value if self.error_type else None,
                    "severity": self.severity.value if self.severity else None,
                }
            )
        return payload


# ================================
# 🔌 ПРОТОКОЛИ
# ================================
class IRateSource(Protocol):
    """📡 Джерело курсів: повертає всі курси відносно `base` (одиниць валюти за 1 base)."""

    async def fetch_rates(self, base: str) -> Dict[str, Decimal]: ...

    async def close(self) -> None: ...


class IRatesProvider(Protocol):
    """📈 Резолвер курсів із кешем."""

    async def get_rate(self, from_currency: str, to_currency: str) -> Decimal: ...

    async def get_multiple_rates(self, base: str, currencies: Iterable[str]) -> Dict[str, Decimal]: ...

    @property
    def last_update_time(self) -> Optional[datetime]: ...


class IConversionService(Protocol):
    """💱 Конвертер, що ніколи не кидає винятків назовні."""

    async def convert(self, amount: Any, from_currency: Any, to_currency: Any) -> ConversionResult: ...
