# tests/conftest.py
import asyncio
import sys
from decimal import Decimal
from pathlib import Path

import pytest

# 1) Додаємо src у sys.path, щоб працював імпорт "currency_engine.…" без встановлення
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from currency_engine.config.config_service import ConfigService  # noqa: E402


# ──────────────────────────────────────────────────────────────────────────────
#                          🔧 Тестові заглушки/фейки
# ──────────────────────────────────────────────────────────────────────────────

class FakeRateSource:
    """Віддає курси з таблиці, рахує звернення, вміє «гальмувати» та падати."""

    def __init__(self, table=None, *, delay: float = 0.0, error: Exception | None = None):
        self.table = table or {}
        self.delay = delay
        self.error = error
        self.calls: list[str] = []
        self.closed = False

    async def fetch_rates(self, base: str):
        self.calls.append(base)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return dict(self.table.get(base, {}))

    async def close(self) -> None:
        self.closed = True


class FakeClock:
    """Керований монотонний годинник для TTL."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ──────────────────────────────────────────────────────────────────────────────
#                               🧪 Фікстури
# ──────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def make_config():
    """Фабрика ізольованих ConfigService поверх пакетних дефолтів."""
    def _make(**sections) -> ConfigService:
        data = {"currency_api": {"source": "static", "timeout_sec": 1, "ttl_sec": 600}}
        for key, value in sections.items():
            data.setdefault(key, {}).update(value)
        return ConfigService.from_dict(data)
    return _make


@pytest.fixture
def config(make_config) -> ConfigService:
    return make_config()


@pytest.fixture
def make_source():
    return FakeRateSource


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def usd_eur_table():
    return {
        "USD": {"EUR": Decimal("0.8"), "JPY": Decimal("110.234")},
        "EUR": {"USD": Decimal("1.25")},
    }
