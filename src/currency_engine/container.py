# 📦 currency_engine/container.py
"""
📦 Контейнер залежностей рушія конвертації.

🔹 Створює джерело курсів, резолвер, валідатор і конвертер у правильному порядку DI.
🔹 Тип джерела (`static` / `http`) та параметри беруться з `ConfigService`.
🔹 Опційно піднімає Prometheus-експортер.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Any, Optional

# 🧩 Внутрішні модулі проєкту
from currency_engine.config.config_service import ConfigService
from currency_engine.domain.currency.interfaces import ConversionResult, IRateSource, ValidationResult
from currency_engine.domain.currency.precision import normalize_rounding
from currency_engine.domain.currency.validation import CurrencyInputValidator
from currency_engine.infrastructure.currency.currency_converter import CurrencyConverter
from currency_engine.infrastructure.currency.currency_manager import CurrencyManager
from currency_engine.infrastructure.currency.rate_sources import HttpRateSource, StaticRateSource
from currency_engine.infrastructure.currency.stress_runner import StressTestRunner
from currency_engine.shared.metrics.exporters import maybe_start_prometheus
from currency_engine.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)


def build_rate_source(config: ConfigService) -> IRateSource:
    """🏭 Обирає джерело курсів за `currency_api.source`."""
    kind = str(config.get("currency_api.source", "static") or "static").strip().lower()
    if kind == "static":
        return StaticRateSource(delay_sec=config.get("currency_api.static_delay_sec", 0.0, cast=float) or 0.0)
    if kind == "http":
        return HttpRateSource(
            config.get("currency_api.url"),
            api_key=config.get("currency_api.api_key"),
            timeout_sec=config.get("currency_api.timeout_sec", 5, cast=float) or 5,
            retry_attempts=config.get("currency_api.retry_attempts", 2, cast=int) or 1,
            retry_delay_sec=config.get("currency_api.retry_delay_sec", 1, cast=float) or 0,
        )
    raise ValueError(f"Unknown currency_api.source: {kind!r}")


# ================================
# 🏛️ КОНТЕЙНЕР ЗАЛЕЖНОСТЕЙ
# ================================
class CurrencyContainer:
    """Координує ініціалізацію сервісів конвертації."""

    def __init__(self, config: ConfigService, *, rate_source: Optional[IRateSource] = None) -> None:
        self.config = config
        logger.info("🚀 Стартуємо побудову контейнера конвертації")
        self._bootstrap_metrics_if_enabled()

        supported = config.get("currency.supported")
        self.validator = CurrencyInputValidator(supported)
        self.rate_source = rate_source or build_rate_source(config)
        self.currency_manager = CurrencyManager(config_service=config, source=self.rate_source)
        self.converter = CurrencyConverter(
            self.currency_manager,
            validator=self.validator,
            rounding=normalize_rounding(config.get("currency.rounding", "ROUND_HALF_EVEN")),
        )
        logger.info("✅ Контейнер ініціалізовано (джерело: %s)", type(self.rate_source).__name__)

    def _bootstrap_metrics_if_enabled(self) -> None:
        """Стартує Prometheus-експортер, якщо порт задано."""
        port = self.config.get("metrics.prometheus.port", 0, cast=int) or 0
        try:
            maybe_start_prometheus(port)
        except OSError:
            logger.exception("⚠️ Не вдалося стартувати експортер метрик")

    # ================================
    # 🔓 ФАСАД
    # ================================
    async def convert(self, amount: Any, from_currency: Any, to_currency: Any) -> ConversionResult:
        return await self.converter.convert(amount, from_currency, to_currency)

    def validate(self, amount: Any, from_currency: Any, to_currency: Any) -> ValidationResult:
        return self.validator.validate(amount, from_currency, to_currency)

    def stress_runner(self, **kwargs: Any) -> StressTestRunner:
        """🏋️ Раннер навантаження поверх цього конвертера."""
        return StressTestRunner(self.converter, self.config, **kwargs)

    async def initialize(self) -> None:
        """🚀 Прогріває кеш курсів перед першими запитами."""
        await self.currency_manager.initialize()

    async def close(self) -> None:
        await self.currency_manager.close()
        logger.info("🔌 Контейнер конвертації закрито")

    async def __aenter__(self) -> "CurrencyContainer":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


__all__ = ["CurrencyContainer", "build_rate_source"]
