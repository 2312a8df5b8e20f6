# 💱 currency_engine/infrastructure/currency/currency_converter.py
"""
💱 Конвертер з точністю, що залежить від величини суми.

🔹 Послідовність: валідація → курс від резолвера → множення в Decimal → вибір точності → квантування.
🔹 Ніколи не кидає винятків назовні: будь-який збій повертається як `ConversionResult(success=False)`.
🔹 Підтримує параметризовану стратегію округлення (за замовчуванням ROUND_HALF_EVEN).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging															# 🧾 Логування операцій
import time																# ⏱️ Час відповіді
from decimal import ROUND_HALF_EVEN, Decimal, localcontext				# 💰 Точна арифметика
from typing import Any, Callable, Optional

# 🧩 Внутрішні модулі проєкту
from currency_engine.domain.currency.interfaces import (
    ConversionResult,
    ErrorType,
    IRatesProvider,
    Severity,
)
from currency_engine.domain.currency.precision import normalize_rounding, quantize, select_precision
from currency_engine.domain.currency.validation import CurrencyInputValidator
from currency_engine.errors.currency_errors import CurrencyServiceError
from currency_engine.shared.metrics.currency import CONVERSION_FAILURES, CONVERSIONS_TOTAL
from currency_engine.shared.utils.logger import LOG_NAME


# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(LOG_NAME)

SYSTEM_ERROR_MESSAGE = "Currency conversion system error"
_ARITHMETIC_PRECISION = 40                                              # 🔢 Значущих цифр для amount × rate


# ================================
# 💱 КОНВЕРТЕР
# ================================
class CurrencyConverter:
    """
    💱 Асинхронний конвертер поверх резолвера курсів.

    - Усередині працює **лише** з Decimal.
    - Точність визначається вхідною сумою (див. `domain.currency.precision`).
    """

    def __init__(
        self,
        rates: IRatesProvider,
        *,
        validator: Optional[CurrencyInputValidator] = None,
        rounding: str = ROUND_HALF_EVEN,
        timer: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._rates = rates
        self._validator = validator or CurrencyInputValidator()
        self._rounding = normalize_rounding(rounding)
        self._timer = timer
        logger.info("💱 CurrencyConverter готовий (rounding=%s)", self._rounding)

    @property
    def validator(self) -> CurrencyInputValidator:
        return self._validator

    async def convert(self, amount: Any, from_currency: Any, to_currency: Any) -> ConversionResult:
        """💱 Конвертує суму; результат завжди `ConversionResult`."""
        started = self._timer()
        try:
            return await self._convert(amount, from_currency, to_currency, started)
        except Exception:  # noqa: BLE001
            logger.error("❌ Неочікуваний збій конвертації %r %r→%r", amount, from_currency, to_currency, exc_info=True)
            return self._failure(SYSTEM_ERROR_MESSAGE, ErrorType.SYSTEM, Severity.CRITICAL, started)

    async def _convert(self, amount: Any, from_currency: Any, to_currency: Any, started: float) -> ConversionResult:
        validation = self._validator.validate(amount, from_currency, to_currency)
        if not validation.valid:
            return self._failure(
                validation.error or "Invalid input",
                validation.error_type or ErrorType.FORMAT,
                validation.severity or Severity.MEDIUM,
                started,
            )

        value = validation.amount
        src = str(validation.from_currency)
        dst = str(validation.to_currency)
        if value is None:
            raise ValueError("Validator returned no amount")

        try:
            rate = await self._rates.get_rate(src, dst)
        except CurrencyServiceError as exc:
            logger.warning("⚠️ Курс %s→%s недоступний: %s", src, dst, exc.message, extra=exc.to_log_extra())
            return self._failure(exc.message, exc.error_type, exc.severity, started)

        with localcontext() as ctx:
            ctx.prec = _ARITHMETIC_PRECISION
            raw = value * rate
            precision = select_precision(value, raw, dst)
            converted = quantize(raw, precision, self._rounding)

        if not (converted.is_finite() and rate.is_finite()):
            raise ArithmeticError(f"Non-finite conversion result: {converted} (rate={rate})")

        elapsed_ms = (self._timer() - started) * 1000
        CONVERSIONS_TOTAL.labels(outcome="success").inc()
        logger.debug(
            "✅ Конвертовано %s %s → %s %s (rate=%s, precision=%d)",
            value,
            src,
            converted,
            dst,
            rate,
            precision,
        )
        return ConversionResult(
            success=True,
            converted_amount=converted,
            exchange_rate=rate,
            precision=precision,
            from_currency=src,
            to_currency=dst,
            response_time_ms=elapsed_ms,
        )

    def _failure(self, error: str, error_type: ErrorType, severity: Severity, started: float) -> ConversionResult:
        CONVERSIONS_TOTAL.labels(outcome="failure").inc()
        CONVERSION_FAILURES.labels(error_type=error_type.value).inc()
        return ConversionResult(
            success=False,
            error=error,
            error_type=error_type,
            severity=severity,
            response_time_ms=(self._timer() - started) * 1000,
        )


__all__ = ["CurrencyConverter", "SYSTEM_ERROR_MESSAGE"]
