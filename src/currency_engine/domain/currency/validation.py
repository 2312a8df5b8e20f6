# 🛡️ currency_engine/domain/currency/validation.py
"""
🛡️ Валідатор вхідних даних конвертації.

🔹 Чиста функція: жодних побічних ефектів і жодних винятків назовні.
🔹 Перше правило, що спрацювало, визначає повідомлення: спершу ланцюжок суми,
    далі кожне правило коду валюти застосовується до `from`, потім до `to`.
🔹 Символьна перевірка йде раніше за довжину та регістр, тож SQL/XSS/shell-пейлоади
    отримують однакове "contains invalid characters".
"""

from __future__ import annotations

# 🔠 Системні імпорти
import logging
import numbers
import re
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, FrozenSet, Iterable, List, Optional, Tuple, cast

# 🧩 Внутрішні модулі проєкту
from currency_engine.domain.currency.constants import (
    CURRENCY_CODE_LENGTH,
    MAX_CODE_LENGTH,
    MAX_SAFE_AMOUNT,
    MIN_SAFE_MAGNITUDE,
    SUPPORTED_CURRENCIES,
)
from currency_engine.domain.currency.interfaces import (
    CurrencyCode,
    ErrorType,
    Severity,
    ValidationResult,
)
from currency_engine.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)

_LETTERS_ONLY = re.compile(r"[A-Za-z]+")                               # 🔤 Лише ASCII-літери

# 🕵️ Класифікація пейлоадів для поля details (повідомлення однакове для всіх)
_PAYLOAD_FAMILIES: Tuple[Tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"[<>]"), "HTML/XML tags"),
    (re.compile(r"\$\{|\{\{"), "template injection"),
    (re.compile(r"['\";]|--"), "SQL injection characters"),
    (re.compile(r"[&|`$]"), "command injection characters"),
    (re.compile(r"\.\.|[/\\]"), "path traversal"),
    (re.compile(r"\s"), "whitespace"),
    (re.compile(r"[^\x00-\x7f]"), "non-ASCII characters"),
)

CodeRule = Callable[[Any, str], Optional[ValidationResult]]


# ================================
# 🧰 ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _as_decimal(amount: Any) -> Decimal:
    """🧮 Приводить числовий тип до Decimal через рядок (без артефактів float)."""
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, int):
        return Decimal(amount)
    if isinstance(amount, float):
        return Decimal(str(amount))
    return Decimal(str(float(amount)))                                 # 🔁 Fraction, numpy-скаляри тощо


def _describe_payload(code: str) -> str:
    for pattern, family in _PAYLOAD_FAMILIES:
        if pattern.search(code):
            return family
    return "unexpected characters"


def _preview(code: str, limit: int = 24) -> str:
    """✂️ Коротке представлення коду для details (довгі рядки не тягнемо в логи)."""
    return code if len(code) <= limit else f"{code[:limit]}… ({len(code)} chars)"


# ================================
# 💰 ЛАНЦЮЖОК СУМИ
# ================================
def _validate_amount(amount: Any) -> Tuple[Optional[ValidationResult], Optional[Decimal]]:
    if amount is None:
        return ValidationResult.fail(
            "Amount is required", ErrorType.TYPE, Severity.HIGH, "Amount parameter is missing"
        ), None

    if isinstance(amount, bool) or not isinstance(amount, (numbers.Real, Decimal)):
        return ValidationResult.fail(
            "Amount must be a valid number",
            ErrorType.TYPE,
            Severity.MEDIUM,
            f"{type(amount).__name__} is not a supported amount type",
        ), None

    try:
        value = _as_decimal(amount)
    except (InvalidOperation, ValueError, OverflowError, TypeError):
        return ValidationResult.fail(
            "Amount must be a valid number", ErrorType.TYPE, Severity.MEDIUM, f"Cannot interpret {amount!r}"
        ), None

    if not value.is_finite():
        kind = "NaN" if value.is_nan() else ("positive infinity" if value > 0 else "negative infinity")
        return ValidationResult.fail(
            "Amount must be a finite number", ErrorType.RANGE, Severity.HIGH, f"Amount is {kind}"
        ), None

    if value <= 0:
        return ValidationResult.fail(
            "Amount must be greater than 0", ErrorType.RANGE, Severity.MEDIUM, f"Amount {value} is not positive"
        ), None

    if value < MIN_SAFE_MAGNITUDE:
        return ValidationResult.fail(
            "Amount is too small to process accurately",
            ErrorType.RANGE,
            Severity.HIGH,
            f"Amount {value} is below the smallest normal double",
        ), None

    if value >= MAX_SAFE_AMOUNT:
        return ValidationResult.fail(
            "Amount exceeds maximum safe processing limit",
            ErrorType.RANGE,
            Severity.HIGH,
            f"Amount {value} is not below {MAX_SAFE_AMOUNT}",
        ), None

    return None, value


# ================================
# 🔤 ПРАВИЛА КОДУ ВАЛЮТИ
# ================================
def _rule_present(code: Any, field: str) -> Optional[ValidationResult]:
    if code is None:
        return ValidationResult.fail(
            "Currency code is required", ErrorType.TYPE, Severity.HIGH, f"{field} is missing"
        )
    return None


def _rule_string(code: Any, field: str) -> Optional[ValidationResult]:
    if not isinstance(code, str):
        return ValidationResult.fail(
            "Currency code must be a string",
            ErrorType.TYPE,
            Severity.MEDIUM,
            f"{field} is {type(code).__name__}, expected str",
        )
    return None


def _rule_not_empty(code: str, field: str) -> Optional[ValidationResult]:
    if code == "":
        return ValidationResult.fail(
            "Currency code cannot be empty", ErrorType.FORMAT, Severity.MEDIUM, f"{field} is an empty string"
        )
    return None


def _rule_charset(code: str, field: str) -> Optional[ValidationResult]:
    if not _LETTERS_ONLY.fullmatch(code):
        return ValidationResult.fail(
            "Currency code contains invalid characters",
            ErrorType.SECURITY,
            Severity.CRITICAL,
            f"Detected {_describe_payload(code)} in {field}",
        )
    return None


def _rule_max_length(code: str, field: str) -> Optional[ValidationResult]:
    if len(code) > MAX_CODE_LENGTH:
        return ValidationResult.fail(
            "Currency code exceeds maximum length",
            ErrorType.SECURITY,
            Severity.HIGH,
            f"{field} has {len(code)} characters (limit {MAX_CODE_LENGTH})",
        )
    return None


def _rule_length(code: str, field: str) -> Optional[ValidationResult]:
    if len(code) != CURRENCY_CODE_LENGTH:
        return ValidationResult.fail(
            "Currency code must be exactly 3 characters",
            ErrorType.FORMAT,
            Severity.MEDIUM,
            f"{field} {_preview(code)!r} has {len(code)} characters",
        )
    return None


def _rule_uppercase(code: str, field: str) -> Optional[ValidationResult]:
    if code != code.upper():
        return ValidationResult.fail(
            "Currency code must be uppercase", ErrorType.FORMAT, Severity.LOW, f"{field} {code!r} is not uppercase"
        )
    return None


_CODE_RULES: Tuple[CodeRule, ...] = (
    _rule_present,
    _rule_string,
    _rule_not_empty,
    _rule_charset,
    _rule_max_length,
    _rule_length,
    _rule_uppercase,
)


# ================================
# 🛡️ ВАЛІДАТОР
# ================================
class CurrencyInputValidator:
    """
    🛡️ Перевіряє (amount, from_currency, to_currency) перед конвертацією.

    Набір підтримуваних валют можна звузити/розширити через конструктор.
    """

    def __init__(self, supported_currencies: Optional[Iterable[str]] = None) -> None:
        codes = SUPPORTED_CURRENCIES if supported_currencies is None else supported_currencies
        self._supported = frozenset(str(code).upper() for code in codes)

    @property
    def supported_currencies(self) -> FrozenSet[str]:
        return self._supported

    def validate(self, amount: Any, from_currency: Any, to_currency: Any) -> ValidationResult:
        """Повертає `ValidationResult`; ніколи не кидає винятків."""
        try:
            result = self._validate(amount, from_currency, to_currency)
        except Exception as exc:  # noqa: BLE001
            logger.error("❌ Збій валідатора", exc_info=True)
            return ValidationResult.fail(
                "Validation system error", ErrorType.SYSTEM, Severity.CRITICAL, str(exc) or type(exc).__name__
            )
        if not result.valid:
            logger.debug("🛡️ Відхилено: %s (%s)", result.error, result.details)
        return result

    def _validate(self, amount: Any, from_currency: Any, to_currency: Any) -> ValidationResult:
        failure, value = _validate_amount(amount)
        if failure is not None:
            return failure

        fields: List[Tuple[Any, str]] = [(from_currency, "fromCurrency"), (to_currency, "toCurrency")]
        for rule in _CODE_RULES:
            for code, field in fields:
                failure = rule(code, field)
                if failure is not None:
                    return failure

        for code, field in fields:
            if code not in self._supported:
                return ValidationResult.fail(
                    f"Invalid currency code: {code}",
                    ErrorType.FORMAT,
                    Severity.MEDIUM,
                    f"{field} {code!r} is not supported",
                )

        return ValidationResult.ok(cast(Decimal, value), CurrencyCode(from_currency), CurrencyCode(to_currency))


_default_validator = CurrencyInputValidator()


def validate(amount: Any, from_currency: Any, to_currency: Any) -> ValidationResult:
    """🛡️ Валідація з дефолтним набором валют."""
    return _default_validator.validate(amount, from_currency, to_currency)


__all__ = ["CurrencyInputValidator", "validate"]
