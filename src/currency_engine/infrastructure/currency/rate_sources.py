# 📡 currency_engine/infrastructure/currency/rate_sources.py
"""
📡 Джерела курсів для `CurrencyManager`.

🔹 `HttpRateSource` — асинхронний httpx-клієнт до REST API курсів
    (`GET <url>/<BASE>` → `{"rates": {...}}` або `{"conversion_rates": {...}}`).
    Транзієнтні збої (таймаут, мережа, 5xx) повторюються; решта одразу піднімається.
🔹 `StaticRateSource` — вбудована таблиця курсів (USD/EUR/GBP/JPY) з оберненими
    та крос-курсами для інших баз. Працює без мережі: dev-режим і тести.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import httpx                                                        # 🌐 HTTP-клієнт

# 🔠 Системні імпорти
import asyncio                                                      # 💤 Паузи між спробами
import logging                                                      # 🧾 Логи джерел
from decimal import Decimal, InvalidOperation                       # 💰 Курси у Decimal
from typing import Any, Dict, Mapping, Optional, Tuple, Type

# 🧩 Внутрішні модулі проєкту
from currency_engine.errors.currency_errors import (
    CurrencyServiceError,
    InvalidRateResponseError,
    RateNetworkError,
    RateServerError,
    RateTimeoutError,
)
from currency_engine.errors.strategies import HttpxErrorStrategy, IErrorHandlingStrategy
from currency_engine.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)

_RETRYABLE: Tuple[Type[CurrencyServiceError], ...] = (RateTimeoutError, RateNetworkError, RateServerError)


# ================================
# 🧰 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def to_rate(value: Any) -> Optional[Decimal]:
    """🔢 Приводить значення до додатного скінченного Decimal; інакше None."""
    if isinstance(value, bool):
        return None
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate


# ================================
# 🌐 HTTP-ДЖЕРЕЛО
# ================================
class HttpRateSource:
    """
    🌐 Отримує знімок курсів для бази з REST API.

    Клієнт створюється ліниво (або передається ззовні — тоді не закривається тут).
    """

    def __init__(
        self,
        url: str,
        *,
        api_key: Optional[str] = None,
        timeout_sec: float = 5.0,
        retry_attempts: int = 2,
        retry_delay_sec: float = 1.0,
        client: Optional[httpx.AsyncClient] = None,
        error_strategy: Optional[IErrorHandlingStrategy] = None,
    ) -> None:
        if not url or not isinstance(url, str):
            raise ValueError("Config 'currency_api.url' is required and must be str.")
        self._url = url.rstrip("/")
        self._api_key = api_key
        self._timeout = float(timeout_sec)
        self._retries = max(1, int(retry_attempts))
        self._retry_delay = max(0.0, float(retry_delay_sec))
        self._client = client
        self._owns_client = client is None
        self._strategy: IErrorHandlingStrategy = error_strategy or HttpxErrorStrategy()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            if self._api_key:
                headers["Authorization"] = f"Bearer {self._api_key}"
            self._client = httpx.AsyncClient(timeout=self._timeout, headers=headers)
            self._owns_client = True
            logger.debug("🌐 Створено httpx.AsyncClient (timeout=%ss)", self._timeout)
        return self._client

    async def fetch_rates(self, base: str) -> Dict[str, Decimal]:
        """
        📥 Повертає {КОД: курс} відносно `base`.

        Raises:
            CurrencyServiceError: підклас за таксономією (таймаут, мережа, 429, 5xx, битий JSON).
        """
        client = self._get_client()
        endpoint = f"{self._url}/{base}"

        for attempt in range(1, self._retries + 1):
            try:
                response = await client.get(endpoint)
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, ValueError) as exc:
                error = self._strategy.handle(exc) or InvalidRateResponseError(details=str(exc))
                logger.warning(
                    "❌ Спроба %s/%s: %s — %s",
                    attempt,
                    self._retries,
                    endpoint,
                    error.message,
                    extra=error.to_log_extra(),
                )
                if not isinstance(error, _RETRYABLE) or attempt >= self._retries:
                    raise error from exc
                await asyncio.sleep(self._retry_delay)                 # ⏳ Лінійний backoff
                continue

            rates = self._parse(payload, base)
            logger.info("✅ Отримано %d курсів для %s", len(rates), base)
            return rates

        raise RateNetworkError(details=f"No attempts left for {endpoint}")

    @staticmethod
    def _parse(payload: Any, base: str) -> Dict[str, Decimal]:
        """🧾 Витягує курси з відповіді; порожній або некоректний знімок → InvalidRateResponseError."""
        if not isinstance(payload, dict):
            raise InvalidRateResponseError(details=f"Expected object, got {type(payload).__name__}")
        if str(payload.get("result", "success")).lower() == "error":
            raise InvalidRateResponseError(details=str(payload.get("error-type") or payload.get("error")))

        raw = payload.get("rates")
        if raw is None:
            raw = payload.get("conversion_rates")
        if not isinstance(raw, dict):
            raise InvalidRateResponseError(details="Missing 'rates' object")

        rates: Dict[str, Decimal] = {}
        for code, value in raw.items():
            rate = to_rate(value)
            if rate is None:
                logger.warning("⚠️ Пропущено некоректний курс %s=%r", code, value)
                continue
            rates[str(code).upper()] = rate
        if not rates:
            raise InvalidRateResponseError(details="No usable rates in response")
        rates[base] = Decimal("1")
        return rates

    async def close(self) -> None:
        """🔌 Закриває власний HTTP-клієнт."""
        if self._client is not None and self._owns_client and not self._client.is_closed:
            await self._client.aclose()
            logger.info("🔌 HTTP-клієнт джерела курсів закрито.")


# ================================
# 🗂️ СТАТИЧНЕ ДЖЕРЕЛО
# ================================
DEFAULT_RATE_TABLE: Mapping[str, Mapping[str, str]] = {
    "USD": {
        "EUR": "0.85235", "GBP": "0.73456", "JPY": "110.234", "CAD": "1.25678",
        "AUD": "1.34567", "CHF": "0.91234", "CNY": "6.45678", "INR": "74.5678",
        "BRL": "5.23456", "KRW": "1180.234", "MXN": "20.1234", "SGD": "1.35678",
        "HKD": "7.78901", "SEK": "8.56789", "NOK": "8.6789", "DKK": "6.34567",
        # 🌍 Решта підтримуваних валют: ціна лише в USD, інші бази виводяться через _derive
        "PLN": "3.8912", "CZK": "21.5678", "HUF": "297.456", "RUB": "73.4567",
        "ZAR": "14.3456", "TRY": "8.5678", "ILS": "3.2456", "AED": "3.6725",
        "SAR": "3.75", "QAR": "3.64", "KWD": "0.30123", "BHD": "0.376",
        "OMR": "0.3845", "JOD": "0.709", "LBP": "1507.5", "EGP": "15.6789",
        "MAD": "8.9456", "TND": "2.7789", "DZD": "134.567", "LYD": "4.5123",
        "SDG": "435.5", "ETB": "44.567", "KES": "108.456", "UGX": "3545.67",
        "TZS": "2318.9", "RWF": "1005.6", "MWK": "805.3", "ZMW": "18.234",
        "BWP": "10.9876", "SZL": "14.3456", "LSL": "14.3456", "NAD": "14.3456",
        "MZN": "63.8", "AOA": "645.2", "XAF": "559.1", "XOF": "559.1",
        "CDF": "1995.5", "GHS": "5.8912", "NGN": "411.5", "XPF": "101.8",
        "FJD": "2.0789", "TOP": "2.2567", "WST": "2.5678", "VUV": "110.23",
        "SBD": "8.0456", "PGK": "3.5123", "NZD": "1.4234", "THB": "32.456",
        "MYR": "4.1789", "PHP": "50.234", "IDR": "14356.5", "UAH": "27.1234",
    },
    "EUR": {
        "USD": "1.17345", "GBP": "0.86234", "JPY": "129.345", "CAD": "1.47456",
        "AUD": "1.5789", "CHF": "1.07123", "CNY": "7.5789", "INR": "87.4567",
        "BRL": "6.14567", "KRW": "1384.567", "MXN": "23.6789", "SGD": "1.59234",
        "HKD": "9.13456", "SEK": "10.0567", "NOK": "10.1789", "DKK": "7.44567",
    },
    "GBP": {
        "USD": "1.36123", "EUR": "1.15987", "JPY": "150.123", "CAD": "1.71234",
        "AUD": "1.83456", "CHF": "1.24567", "CNY": "8.79012", "INR": "101.456",
        "BRL": "7.13456", "KRW": "1607.89", "MXN": "27.4567", "SGD": "1.84567",
        "HKD": "10.6012", "SEK": "11.6789", "NOK": "11.8012", "DKK": "8.64567",
    },
    "JPY": {
        "USD": "0.00907", "EUR": "0.00773", "GBP": "0.00665", "CAD": "0.0114",
        "AUD": "0.01221", "CHF": "0.00828", "CNY": "0.05856", "INR": "0.67612",
        "BRL": "0.04751", "KRW": "10.7123", "MXN": "0.18267", "SGD": "0.01229",
        "HKD": "0.07067", "SEK": "0.07778", "NOK": "0.07856", "DKK": "0.05756",
    },
}


class StaticRateSource:
    """
    🗂️ Курси з вбудованої (або переданої) таблиці.

    Для бази поза таблицею: обернені курси з рядків, що її містять, плюс
    крос-курси через перший такий рядок.
    """

    def __init__(
        self,
        table: Optional[Mapping[str, Mapping[str, Any]]] = None,
        *,
        delay_sec: float = 0.0,
    ) -> None:
        source = DEFAULT_RATE_TABLE if table is None else table
        self._table: Dict[str, Dict[str, Decimal]] = {}
        for base, row in source.items():
            parsed: Dict[str, Decimal] = {}
            for code, value in row.items():
                rate = to_rate(value)
                if rate is None:
                    logger.warning("⚠️ Статична таблиця: пропущено %s→%s=%r", base, code, value)
                    continue
                parsed[str(code).upper()] = rate
            self._table[str(base).upper()] = parsed
        self._delay = max(0.0, float(delay_sec))

    async def fetch_rates(self, base: str) -> Dict[str, Decimal]:
        if self._delay:
            await asyncio.sleep(self._delay)                          # 🐢 Імітація мережевої затримки

        base = base.upper()
        if base in self._table:
            rates = dict(self._table[base])
        else:
            rates = self._derive(base)
        rates[base] = Decimal("1")
        logger.debug("🗂️ Статичний знімок для %s: %d курсів", base, len(rates))
        return rates

    def _derive(self, base: str) -> Dict[str, Decimal]:
        rates: Dict[str, Decimal] = {}
        pivot: Optional[Tuple[str, Dict[str, Decimal]]] = None
        for row_base, row in self._table.items():
            if base in row:
                rates[row_base] = Decimal(1) / row[base]
                if pivot is None:
                    pivot = (row_base, row)
        if pivot is not None:
            _, row = pivot
            base_per_pivot = row[base]
            for code, rate in row.items():
                if code != base:
                    rates.setdefault(code, rate / base_per_pivot)
        return rates

    async def close(self) -> None:
        return None


__all__ = ["HttpRateSource", "StaticRateSource", "DEFAULT_RATE_TABLE", "to_rate"]
