# 💵 currency_engine/infrastructure/currency/currency_manager.py
"""
💵 CurrencyManager — резолвер курсів із кешем знімків по базовій валюті.

🎯 Призначення:
    • на вимогу отримує знімок курсів для бази через `IRateSource`;
    • кешує знімок із TTL і мітками часу; повертає курс пари (або обернений);
    • обмежує кожен запит до джерела таймаутом → `RateTimeoutError`.

⚙️ Конкурентність:
    • читання лише бере посилання на незмінний `RateSnapshot`;
    • запис серіалізується `asyncio.Lock` на базу та замінює знімок одним присвоєнням,
      тож мітка часу завжди належить тому знімку, з якого прочитано курс.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio                                                      # 🔁 Локи та таймаути
import logging                                                      # 🧾 Логи сервісу
import time                                                         # ⏱️ TTL/мітки часу
from dataclasses import dataclass                                   # 🧱 Незмінний знімок
from datetime import datetime, timezone                             # 🕒 Час останнього оновлення
from decimal import Decimal                                         # 💰 Курси
from types import MappingProxyType                                  # 🔒 Незмінна мапа курсів
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union, cast

# 🧩 Внутрішні модулі проєкту
from currency_engine.config.config_service import ConfigService
from currency_engine.domain.currency.interfaces import IRateSource
from currency_engine.errors.currency_errors import (
    CurrencyServiceError,
    InvalidRateResponseError,
    RateNotFoundError,
    RateTimeoutError,
)
from currency_engine.infrastructure.currency.rate_sources import to_rate
from currency_engine.shared.metrics.currency import (
    RATE_CACHE_HITS,
    RATE_CACHE_MISSES,
    RATE_FETCH_LATENCY,
)
from currency_engine.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)

_ONE = Decimal("1")


# ================================
# 🧊 ЗНІМОК КУРСІВ
# ================================
@dataclass(frozen=True, slots=True)
class RateSnapshot:
    """🧊 Курси відносно `base` на момент `fetched_at` (одиниць валюти за 1 base)."""

    base: str
    rates: Mapping[str, Decimal]
    fetched_at: float                                               # 🕒 Unix-час (для людей і логів)
    fetched_monotonic: float                                        # ⏱️ Монотонний час (для TTL)

    def rate_for(self, currency: str) -> Optional[Decimal]:
        return self.rates.get(currency)


class CurrencyManager:
    """
    🏦 Резолвер курсів: кеш знімків, TTL, таймаут джерела, ручні корекції.
    """

    def __init__(
        self,
        config_service: ConfigService,
        source: IRateSource,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config_service
        self._source = source
        self._clock = clock

        self._timeout: float = cast(float, self._config.get("currency_api.timeout_sec", 5, cast=float) or 5)
        self._ttl_sec: float = cast(float, self._config.get("currency_api.ttl_sec", 600, cast=float) or 0)

        self._snapshots: Dict[str, RateSnapshot] = {}               # 💱 База → останній знімок
        self._locks: Dict[str, asyncio.Lock] = {}                   # 🔐 Один записувач на базу
        self._last_update_ts: float = 0.0                           # 🕒 Останнє успішне оновлення
        logger.debug("⚙️ CurrencyManager: timeout=%ss ttl=%ss source=%s", self._timeout, self._ttl_sec, type(source).__name__)

    # ================================
    # 🔓 ПУБЛІЧНИЙ ІНТЕРФЕЙС
    # ================================
    async def get_rate(self, from_currency: str, to_currency: str) -> Decimal:
        """
        💱 Курс `to` за одиницю `from`.

        Якщо знімок `from` не містить `to`, пробуємо обернений курс зі знімка `to`.

        Raises:
            CurrencyServiceError: таймаут/мережа/ліміт/сервер/битий знімок або відсутня пара.
        """
        src = self._normalize(from_currency)
        dst = self._normalize(to_currency)
        if src == dst:
            return _ONE

        snapshot = await self._snapshot_for(src)
        rate = snapshot.rate_for(dst)
        if rate is not None:
            return rate

        reverse = await self._snapshot_for(dst)
        inverse = reverse.rate_for(src)
        if inverse is not None:
            logger.debug("🔁 %s→%s через обернений курс %s", src, dst, inverse)
            return _ONE / inverse

        logger.warning("🔍 Курс %s→%s відсутній в обох знімках", src, dst)
        raise RateNotFoundError(src, dst)

    async def get_multiple_rates(self, base: str, currencies: Iterable[str]) -> Dict[str, Decimal]:
        """
        📊 Курси кількох валют відносно `base` (одним знімком, де можливо).

        Валюти без курсу пропускаються з попередженням; інші збої піднімаються.
        """
        src = self._normalize(base)
        snapshot = await self._snapshot_for(src)
        result: Dict[str, Decimal] = {}
        for currency in currencies:
            dst = self._normalize(currency)
            if dst == src:
                result[dst] = _ONE
                continue
            rate = snapshot.rate_for(dst)
            if rate is None:
                try:
                    rate = await self.get_rate(src, dst)
                except RateNotFoundError:
                    logger.warning("⚠️ get_multiple_rates: немає курсу %s→%s", src, dst)
                    continue
            result[dst] = rate
        return result

    @property
    def last_update_ts(self) -> float:
        """Unix-час останнього успішного оновлення будь-якого знімка (0.0 — ще не було)."""
        return self._last_update_ts

    @property
    def last_update_time(self) -> Optional[datetime]:
        """🕒 Те саме, що `last_update_ts`, але як UTC datetime (None — ще не було)."""
        if not self._last_update_ts:
            return None
        return datetime.fromtimestamp(self._last_update_ts, tz=timezone.utc)

    def is_cache_fresh(self, base: str) -> bool:
        """True, якщо знімок бази є і TTL ще не минув."""
        snapshot = self._snapshots.get(self._normalize(base))
        return snapshot is not None and self._is_fresh(snapshot)

    def get_all_rates(self, base: str) -> Dict[str, Decimal]:
        """📤 Копія кешованих курсів бази (без звернення до джерела)."""
        snapshot = self._snapshots.get(self._normalize(base))
        return dict(snapshot.rates) if snapshot else {}

    async def refresh(self, base: str) -> RateSnapshot:
        """🔄 Примусово оновлює знімок бази, ігноруючи TTL."""
        src = self._normalize(base)
        async with self._lock_for(src):
            return await self._fetch_and_store(src)

    async def set_rate_manually(self, base: str, currency: str, rate: Union[Decimal, float, int, str]) -> None:
        """
        ✍️ Ручна установка курсу `currency` відносно `base`.

        Використовується адміністратором або в аварійних сценаріях, коли джерело недоступне.
        """
        safe_rate = to_rate(rate)
        if safe_rate is None:
            logger.error("🚫 Спроба встановити невалідний курс %s→%s: %r", base, currency, rate)
            raise ValueError("Rate must be a positive finite number.")
        src = self._normalize(base)
        dst = self._normalize(currency)
        if not src or not dst:
            raise ValueError("Currency code cannot be empty.")

        async with self._lock_for(src):
            current = self._snapshots.get(src)
            rates = dict(current.rates) if current else {src: _ONE}
            rates[dst] = safe_rate
            self._store(src, rates)
        logger.info("✍️ Курс %s→%s встановлено вручну: %s", src, dst, safe_rate)

    async def initialize(self, bases: Optional[Iterable[str]] = None) -> None:
        """
        🚀 Прогріває знімки для баз (за замовчуванням `currency_api.warmup_bases`).

        Викликається один раз на старті сервісу; свіжі знімки не перезапитуються.
        Збої джерела піднімаються як `CurrencyServiceError`.
        """
        targets = self._config.get("currency_api.warmup_bases") if bases is None else bases
        for base in targets or ():
            await self._snapshot_for(self._normalize(base))
        logger.info("🔧 CurrencyManager ініціалізовано (знімків: %d)", len(self._snapshots))

    async def close(self) -> None:
        """🔌 Закриває джерело курсів."""
        await self._source.close()

    async def __aenter__(self) -> "CurrencyManager":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ================================
    # 🔒 ВНУТРІШНЯ ЛОГІКА
    # ================================
    @staticmethod
    def _normalize(code: str) -> str:
        return (code or "").strip().upper()

    def _lock_for(self, base: str) -> asyncio.Lock:
        lock = self._locks.get(base)
        if lock is None:
            lock = self._locks[base] = asyncio.Lock()
        return lock

    def _is_fresh(self, snapshot: RateSnapshot) -> bool:
        return (self._clock() - snapshot.fetched_monotonic) < self._ttl_sec

    async def _snapshot_for(self, base: str) -> RateSnapshot:
        snapshot = self._snapshots.get(base)
        if snapshot is not None and self._is_fresh(snapshot):
            RATE_CACHE_HITS.inc()
            return snapshot

        async with self._lock_for(base):
            snapshot = self._snapshots.get(base)                      # 🔁 Поки чекали, міг оновити інший
            if snapshot is not None and self._is_fresh(snapshot):
                RATE_CACHE_HITS.inc()
                return snapshot
            RATE_CACHE_MISSES.inc()
            return await self._fetch_and_store(base)

    async def _fetch_and_store(self, base: str) -> RateSnapshot:
        """📥 Викликає джерело під таймаутом і атомарно підміняє знімок. Викликати під локом бази."""
        started = time.perf_counter()
        try:
            raw = await asyncio.wait_for(self._source.fetch_rates(base), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            logger.error("⏱️ Джерело курсів не відповіло за %ss (base=%s)", self._timeout, base)
            raise RateTimeoutError(details=f"No response within {self._timeout}s for {base}") from exc
        except CurrencyServiceError as exc:
            logger.error("❌ Збій джерела курсів для %s: %s", base, exc.message, extra=exc.to_log_extra())
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error("❌ Неочікувана помилка джерела курсів для %s", base, exc_info=True)
            raise InvalidRateResponseError(details=f"{type(exc).__name__}: {exc}") from exc
        finally:
            RATE_FETCH_LATENCY.observe(time.perf_counter() - started)

        if not isinstance(raw, Mapping):
            raise InvalidRateResponseError(details=f"Source returned {type(raw).__name__}")

        rates: Dict[str, Decimal] = {}
        for code, value in raw.items():
            rate = to_rate(value)
            if rate is None:
                logger.warning("⚠️ Відкинуто некоректний курс %s→%s=%r", base, code, value)
                continue
            rates[self._normalize(str(code))] = rate
        rates[base] = _ONE

        snapshot = self._store(base, rates)
        logger.info("🕒 Знімок %s оновлено (%d курсів)", base, len(rates))
        return snapshot

    def _store(self, base: str, rates: Dict[str, Decimal]) -> RateSnapshot:
        snapshot = RateSnapshot(
            base=base,
            rates=MappingProxyType(rates),
            fetched_at=time.time(),
            fetched_monotonic=self._clock(),
        )
        self._snapshots[base] = snapshot                              # 🔄 Одне присвоєння — без «рваного» стану
        self._last_update_ts = snapshot.fetched_at
        return snapshot


__all__ = ["CurrencyManager", "RateSnapshot"]
