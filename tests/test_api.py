"""
🧪 test_api.py — публічні точки входу та контейнер залежностей

Перевіряє:
- convert_currency / validate_currency_input поверх спільного контейнера
- Підміну контейнера (DI) і його закриття
- Вибір джерела курсів за currency_api.source
"""

from decimal import Decimal

import pytest

import currency_engine
from currency_engine import (
    ConversionResult,
    CurrencyContainer,
    ValidationResult,
    convert_currency,
    get_currency_service,
    set_currency_service,
    shutdown_currency_service,
    validate_currency_input,
)
from currency_engine.container import build_rate_source
from currency_engine.infrastructure.currency.rate_sources import HttpRateSource, StaticRateSource
from currency_engine.infrastructure.currency.stress_runner import StressTestRunner


@pytest.fixture
def container(config):
    instance = CurrencyContainer(config)
    set_currency_service(instance)
    yield instance
    set_currency_service(None)


@pytest.mark.asyncio
async def test_convert_currency(container):
    result = await convert_currency(100, "USD", "EUR")

    assert isinstance(result, ConversionResult)
    assert result.success is True
    assert result.converted_amount == Decimal("85.24")
    assert result.precision == 2


@pytest.mark.asyncio
async def test_convert_currency_never_raises(container):
    result = await convert_currency("100", None, {"$ne": 1})
    assert result.success is False
    assert result.error == "Amount must be a valid number"


@pytest.mark.asyncio
async def test_validate_currency_input(container):
    ok = await validate_currency_input(5, "GBP", "JPY")
    bad = await validate_currency_input(5, "GBP", "gbp")

    assert isinstance(ok, ValidationResult) and ok.valid is True
    assert bad.error == "Currency code must be uppercase"


@pytest.mark.asyncio
async def test_shutdown_resets_shared_container(config, make_source):
    source = make_source({"USD": {"EUR": 1}})
    set_currency_service(CurrencyContainer(config, rate_source=source))

    await shutdown_currency_service()

    assert source.closed is True
    assert currency_engine.api._container is None


def test_get_currency_service_is_lazy_singleton(config):
    set_currency_service(None)
    try:
        first = get_currency_service(config)
        assert get_currency_service() is first
        assert isinstance(first.rate_source, StaticRateSource)
    finally:
        set_currency_service(None)


def test_container_respects_supported_and_rounding(make_config):
    cfg = make_config(currency={"supported": ["USD", "UAH"], "rounding": "half_up"})
    container = CurrencyContainer(cfg)

    assert container.validate(1, "USD", "UAH").valid is True
    assert container.validate(1, "USD", "EUR").error == "Invalid currency code: EUR"


def test_container_builds_stress_runner(config):
    assert isinstance(CurrencyContainer(config).stress_runner(), StressTestRunner)


@pytest.mark.asyncio
async def test_build_rate_source_variants(make_config):
    assert isinstance(build_rate_source(make_config()), StaticRateSource)

    http = build_rate_source(make_config(currency_api={"source": "http", "url": "https://rates.example/latest"}))
    assert isinstance(http, HttpRateSource)
    await http.close()

    with pytest.raises(ValueError):
        build_rate_source(make_config(currency_api={"source": "carrier-pigeon"}))


@pytest.mark.asyncio
async def test_container_context_warms_and_closes(make_config, make_source):
    source = make_source({"GBP": {"USD": 1.36}})
    cfg = make_config(currency_api={"warmup_bases": ["GBP"]})

    async with CurrencyContainer(cfg, rate_source=source) as container:
        assert source.calls == ["GBP"]
        result = await container.convert(10, "GBP", "USD")
        assert result.converted_amount == Decimal("13.6000")

    assert source.closed is True


@pytest.mark.asyncio
async def test_every_supported_currency_converts_with_default_source(config):
    container = CurrencyContainer(config)
    failures = []
    for code in sorted(container.validator.supported_currencies):
        for src, dst in (("USD", code), (code, "EUR"), ("JPY", code), (code, "GBP")):
            result = await container.convert(10_000_000, src, dst)
            if not result.success:
                failures.append((src, dst, result.error))
            elif not result.converted_amount.is_finite() or result.converted_amount <= 0:
                failures.append((src, dst, str(result.converted_amount)))

    assert failures == []
    await container.close()


@pytest.mark.asyncio
async def test_cross_rate_between_usd_only_currencies(config):
    container = CurrencyContainer(config)
    result = await container.convert(100, "PLN", "UAH")

    assert result.success is True
    assert result.exchange_rate == pytest.approx(Decimal("27.1234") / Decimal("3.8912"))
    await container.close()
