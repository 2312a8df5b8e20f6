# 📈 currency_engine/shared/metrics/currency.py
"""
📈 Prometheus-метрики конвертації валют.

🔹 `CONVERSIONS_TOTAL` — конверсії за результатом (`success` / `failure`).
🔹 `CONVERSION_FAILURES` — відмови за категорією помилки (`error_type`).
🔹 `RATE_CACHE_HITS` / `RATE_CACHE_MISSES` — кеш курсів.
🔹 `RATE_FETCH_LATENCY` — час запиту до джерела курсів.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import Counter, Histogram                      # 📊 Prometheus-метрики

# ================================
# 💱 КОНВЕРСІЇ
# ================================
CONVERSIONS_TOTAL = Counter(
    "currency_conversions_total",                                     # 🏷️ Імʼя метрики
    "Currency conversions by outcome",                                # 📝 Опис
    ["outcome"],
)

CONVERSION_FAILURES = Counter(
    "currency_conversion_failures_total",
    "Failed currency conversions by error type",
    ["error_type"],
)

# ================================
# 🗃️ КЕШ КУРСІВ
# ================================
RATE_CACHE_HITS = Counter(
    "currency_rate_cache_hits_total",
    "Exchange rate lookups served from cache",
)

RATE_CACHE_MISSES = Counter(
    "currency_rate_cache_misses_total",
    "Exchange rate lookups that required an upstream fetch",
)

# ================================
# ⏱️ ЛАТЕНТНІСТЬ ДЖЕРЕЛА
# ================================
RATE_FETCH_LATENCY = Histogram(
    "currency_rate_fetch_seconds",
    "Time spent fetching an exchange rate snapshot",
)


__all__ = [
    "CONVERSIONS_TOTAL",
    "CONVERSION_FAILURES",
    "RATE_CACHE_HITS",
    "RATE_CACHE_MISSES",
    "RATE_FETCH_LATENCY",
]
