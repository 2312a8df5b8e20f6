# 🎯 currency_engine/domain/currency/precision.py
"""
🎯 Політика точності: скільки знаків після коми лишати у сконвертованій сумі.

🔹 Рівень обирається за величиною **вхідної** суми: (0, 0.01) → 8, [0.01, 1) → 6,
    [1, 100) → 4, [100, ∞) → 2. Нижні межі включні.
🔹 Валюти без дробових одиниць (JPY) як ціль: результат ≥ 1 → 0 знаків,
    результат < 0.01 → 8, інакше 2. Мікросуми на вході завжди лишаються з 8 знаками.
"""

from __future__ import annotations

# 🔠 Системні імпорти
from decimal import ROUND_HALF_EVEN, Decimal
from typing import FrozenSet

# 🧩 Внутрішні модулі проєкту
from currency_engine.domain.currency.constants import (
    DEFAULT_PRECISION,
    MICRO_PRECISION,
    PRECISION_TIERS,
    ZERO_DECIMAL_CURRENCIES,
    ZERO_DECIMAL_SUBUNIT_PRECISION,
)

_ONE = Decimal("1")
_SUBUNIT = Decimal("0.01")

ROUNDING_MODES: FrozenSet[str] = frozenset(
    {
        "ROUND_HALF_EVEN",
        "ROUND_HALF_UP",
        "ROUND_HALF_DOWN",
        "ROUND_UP",
        "ROUND_DOWN",
        "ROUND_CEILING",
        "ROUND_FLOOR",
        "ROUND_05UP",
    }
)


def precision_for_amount(amount: Decimal) -> int:
    """📏 Рівень точності за величиною вхідної суми."""
    for upper_bound, digits in PRECISION_TIERS:
        if amount < upper_bound:
            return digits
    return DEFAULT_PRECISION


def select_precision(amount: Decimal, converted: Decimal, to_currency: str) -> int:
    """🎯 Остаточна точність з урахуванням валюти призначення."""
    tier = precision_for_amount(amount)
    if to_currency not in ZERO_DECIMAL_CURRENCIES or tier == MICRO_PRECISION:
        return tier
    if converted >= _ONE:
        return 0
    if converted < _SUBUNIT:
        return MICRO_PRECISION
    return ZERO_DECIMAL_SUBUNIT_PRECISION


def quantize(value: Decimal, precision: int, rounding: str = ROUND_HALF_EVEN) -> Decimal:
    """📐 Округлює до 10^-precision обраною стратегією."""
    return value.quantize(Decimal(1).scaleb(-precision), rounding=rounding)


def normalize_rounding(name: object) -> str:
    """🔁 'round_half_up' / 'ROUND_HALF_UP' → константа decimal; невідоме → ValueError."""
    candidate = str(name or "").strip().upper()
    if not candidate.startswith("ROUND_"):
        candidate = f"ROUND_{candidate}"
    if candidate not in ROUNDING_MODES:
        raise ValueError(f"Unknown rounding mode: {name!r}")
    return candidate


__all__ = [
    "ROUNDING_MODES",
    "precision_for_amount",
    "select_precision",
    "quantize",
    "normalize_rounding",
]
