# 📜 currency_engine/errors/strategies.py
"""
📜 Стратегії конвертації сторонніх винятків у `CurrencyServiceError`.

🔹 Джерела курсів делегують сюди розбір винятків, а не тримають if-ланцюжки в собі.
🔹 Нові транспорти додаються новою стратегією без змін у джерелах.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx															# 🌐 HTTP-клієнт (винятки)

# 🔠 Системні імпорти
import json
import logging
from typing import Optional, Protocol

# 🧩 Внутрішні модулі проєкту
from currency_engine.shared.utils.logger import LOG_NAME
from .currency_errors import (
    CurrencyServiceError,
    InvalidRateResponseError,
    RateLimitExceededError,
    RateNetworkError,
    RateServerError,
    RateTimeoutError,
)

logger = logging.getLogger(LOG_NAME)


def _request_url(error: Exception) -> str:
    """URL запиту з httpx-помилки; `.request` може бути не встановлений."""
    if not isinstance(error, httpx.HTTPError):
        return "N/A"
    try:
        return str(error.request.url)
    except RuntimeError:
        return "N/A"


# ================================
# 🧠 КОНТРАКТ СТРАТЕГІЙ
# ================================
class IErrorHandlingStrategy(Protocol):
    """🧠 Контракт із єдиним методом `handle`."""

    def handle(self, error: Exception) -> Optional[CurrencyServiceError]:
        """Повертає доменну помилку, якщо виняток розпізнано, або None."""


# ================================
# 🌐 HTTPX-СТРАТЕГІЯ
# ================================
class HttpxErrorStrategy(IErrorHandlingStrategy):
    """🌐 Перетворює httpx-помилки на таксономію сервісу курсів."""

    def handle(self, error: Exception) -> Optional[CurrencyServiceError]:
        if isinstance(error, CurrencyServiceError):						# 🔁 Уже доменна
            return error

        url = _request_url(error)

        if isinstance(error, httpx.TimeoutException):					# ⏱️ Connect/read/write/pool timeout
            logger.debug("⏱️ httpx timeout", extra={"url": url})
            return RateTimeoutError(details=str(error) or type(error).__name__)

        if isinstance(error, httpx.HTTPStatusError):					# 🔢 Неочікуваний статус
            status = error.response.status_code
            logger.debug("🔢 httpx status error", extra={"url": url, "status_code": status})
            if status == 429:
                return RateLimitExceededError(details=str(error), status_code=status)
            if status >= 500:
                return RateServerError(details=str(error), status_code=status)
            return InvalidRateResponseError(details=str(error), status_code=status)

        if isinstance(error, (json.JSONDecodeError, httpx.DecodingError)):	# 📄 Битий JSON / кодування
            logger.debug("📄 Некоректне тіло відповіді")
            return InvalidRateResponseError(details=str(error))

        if isinstance(error, httpx.RequestError):						# 🌐 DNS, connect, protocol, redirects
            logger.debug("🌐 httpx request error", extra={"url": url})
            return RateNetworkError(details=str(error) or type(error).__name__)

        return None


__all__ = [
    "IErrorHandlingStrategy",
    "HttpxErrorStrategy",
]
