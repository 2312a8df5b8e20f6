# 🚨 currency_engine/errors/__init__.py
"""
🚨 Помилки рушія конвертації.

🔹 `currency_errors` — ієрархія `AppError` → `CurrencyServiceError` → конкретні збої.
🔹 `strategies` — перетворення httpx-винятків у доменні помилки.
"""

from .currency_errors import (
    AppError,
    CurrencyServiceError,
    InvalidRateResponseError,
    RateLimitExceededError,
    RateNetworkError,
    RateNotFoundError,
    RateServerError,
    RateTimeoutError,
)
from .strategies import HttpxErrorStrategy, IErrorHandlingStrategy

__all__ = [
    "AppError",
    "CurrencyServiceError",
    "RateTimeoutError",
    "RateNetworkError",
    "RateLimitExceededError",
    "RateServerError",
    "InvalidRateResponseError",
    "RateNotFoundError",
    "IErrorHandlingStrategy",
    "HttpxErrorStrategy",
]
