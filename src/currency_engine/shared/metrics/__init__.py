# 📊 currency_engine/shared/metrics/__init__.py
"""
📊 Пакет метрик Prometheus для рушія конвертації.

🔹 Лічильники конверсій, кешу курсів і латентності джерела.
🔹 Легкий bootstrap експортера `/metrics`.
"""

from __future__ import annotations

# 💱 Валютні метрики
from .currency import (
    CONVERSION_FAILURES,
    CONVERSIONS_TOTAL,
    RATE_CACHE_HITS,
    RATE_CACHE_MISSES,
    RATE_FETCH_LATENCY,
)

# 🚀 Експортер Prometheus
from .exporters import maybe_start_prometheus

# ================================
# 📦 ЕКСПОРТ ПАКЕТУ
# ================================
__all__ = [
    "CONVERSIONS_TOTAL",
    "CONVERSION_FAILURES",
    "RATE_CACHE_HITS",
    "RATE_CACHE_MISSES",
    "RATE_FETCH_LATENCY",
    "maybe_start_prometheus",
]
