# 💱 currency_engine/infrastructure/currency/__init__.py
"""
💱 Інфраструктурні сервіси для роботи з валютами.

🔹 `CurrencyManager` — резолвер курсів із кешем і таймаутом.
🔹 `CurrencyConverter` — конвертація з точністю за величиною суми.
🔹 `HttpRateSource` / `StaticRateSource` — джерела курсів.
🔹 `StressTestRunner` — навантажувальний прогін конвертера.
"""

from __future__ import annotations

# 🧠 Керування курсами
from .currency_manager import CurrencyManager, RateSnapshot

# 🔁 Конвертація валют
from .currency_converter import CurrencyConverter

# 📡 Джерела курсів
from .rate_sources import HttpRateSource, StaticRateSource

# 🏋️ Навантаження
from .stress_runner import StressTestReport, StressTestRunner, StressTestStatus

__all__ = [
    "CurrencyConverter",
    "CurrencyManager",
    "RateSnapshot",
    "HttpRateSource",
    "StaticRateSource",
    "StressTestReport",
    "StressTestRunner",
    "StressTestStatus",
]
