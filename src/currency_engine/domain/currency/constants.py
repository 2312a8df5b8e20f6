# 📏 currency_engine/domain/currency/constants.py
"""📏 Межі валідації, підтримувані валюти та пороги точності."""

from __future__ import annotations

# 🔠 Системні імпорти
import sys
from decimal import Decimal
from typing import FrozenSet, Tuple

# ================================
# 🔢 МЕЖІ СУМИ
# ================================
MAX_SAFE_INTEGER: int = 2**53 - 1                                      # 🔝 Найбільше ціле, що float зберігає точно
MAX_SAFE_AMOUNT: Decimal = Decimal(MAX_SAFE_INTEGER)
MIN_SAFE_MAGNITUDE: Decimal = Decimal(repr(sys.float_info.min))        # 🔻 Найменший нормалізований double; субнормалі відкидаємо

# ================================
# 🔤 КОДИ ВАЛЮТ
# ================================
CURRENCY_CODE_LENGTH: int = 3
MAX_CODE_LENGTH: int = 16                                              # 📏 Довше — атака на довжину, окреме повідомлення

SUPPORTED_CURRENCIES: FrozenSet[str] = frozenset(
    {
        "USD", "EUR", "GBP", "JPY", "CAD", "AUD", "CHF", "CNY", "INR", "BRL",
        "KRW", "MXN", "SGD", "HKD", "SEK", "NOK", "DKK", "PLN", "CZK", "HUF",
        "RUB", "ZAR", "TRY", "ILS", "AED", "SAR", "QAR", "KWD", "BHD", "OMR",
        "JOD", "LBP", "EGP", "MAD", "TND", "DZD", "LYD", "SDG", "ETB", "KES",
        "UGX", "TZS", "RWF", "MWK", "ZMW", "BWP", "SZL", "LSL", "NAD", "MZN",
        "AOA", "XAF", "XOF", "CDF", "GHS", "NGN", "XPF", "FJD", "TOP", "WST",
        "VUV", "SBD", "PGK", "NZD", "THB", "MYR", "PHP", "IDR", "UAH",
    }
)

# ================================
# 🎯 ТОЧНІСТЬ
# ================================
# (верхня межа суми, не включно; кількість знаків після коми)
PRECISION_TIERS: Tuple[Tuple[Decimal, int], ...] = (
    (Decimal("0.01"), 8),                                              # 🔬 Мікросуми
    (Decimal("1"), 6),                                                 # 🪙 Менше одиниці
    (Decimal("100"), 4),                                               # 💵 Звичайні суми
)
DEFAULT_PRECISION: int = 2                                             # 💰 Від 100 і вище
MICRO_PRECISION: int = 8

ZERO_DECIMAL_CURRENCIES: FrozenSet[str] = frozenset({"JPY"})           # 🇯🇵 Без дробових одиниць
ZERO_DECIMAL_SUBUNIT_PRECISION: int = 2
