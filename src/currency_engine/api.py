# 🚪 currency_engine/api.py
"""
🚪 Точки входу для UI та тестових стендів.

🔹 `convert_currency()` / `validate_currency_input()` — асинхронні, завжди повертають DTO.
🔹 За замовчуванням працюють через лінивий `CurrencyContainer` зі `ConfigService()`.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
from typing import Any, Optional

# 🧩 Внутрішні модулі проєкту
from currency_engine.config.config_service import ConfigService
from currency_engine.container import CurrencyContainer
from currency_engine.domain.currency.interfaces import ConversionResult, ValidationResult
from currency_engine.shared.utils.logger import LOG_NAME, init_logging_from_config

logger = logging.getLogger(LOG_NAME)

_container: Optional[CurrencyContainer] = None


def get_currency_service(config: Optional[ConfigService] = None) -> CurrencyContainer:
    """🏛️ Повертає спільний контейнер (створює при першому виклику й налаштовує логування)."""
    global _container
    if _container is None:
        cfg = config or ConfigService()
        init_logging_from_config(cfg.get("logging"))
        _container = CurrencyContainer(cfg)
        logger.info("🏛️ Спільний сервіс конвертації створено")
    return _container


def set_currency_service(container: Optional[CurrencyContainer]) -> None:
    """🔁 Підміняє спільний контейнер (DI у застосунку або тестах)."""
    global _container
    _container = container


async def convert_currency(amount: Any, from_currency: Any, to_currency: Any) -> ConversionResult:
    """💱 Конвертує суму спільним конвертером."""
    return await get_currency_service().convert(amount, from_currency, to_currency)


async def validate_currency_input(amount: Any, from_currency: Any, to_currency: Any) -> ValidationResult:
    """🛡️ Перевіряє вхідні дані без конвертації."""
    return get_currency_service().validate(amount, from_currency, to_currency)


async def shutdown_currency_service() -> None:
    """🔌 Закриває спільний контейнер, якщо він був створений."""
    global _container
    if _container is not None:
        await _container.close()
        _container = None


__all__ = [
    "convert_currency",
    "validate_currency_input",
    "get_currency_service",
    "set_currency_service",
    "shutdown_currency_service",
]
