"""
🧪 test_rate_sources.py — HttpRateSource (через httpx.MockTransport) і StaticRateSource

Перевіряє:
- Розбір відповіді ("rates" / "conversion_rates"), відкидання битих курсів
- Повтори лише для транзієнтних збоїв (таймаут, мережа, 5xx)
- Мапінг 429 / 4xx / битого JSON без повторів
- Обернені та крос-курси статичної таблиці
"""

from decimal import Decimal

import httpx
import pytest

from currency_engine.errors import (
    InvalidRateResponseError,
    RateLimitExceededError,
    RateNetworkError,
    RateServerError,
    RateTimeoutError,
)
from currency_engine.infrastructure.currency.rate_sources import (
    HttpRateSource,
    StaticRateSource,
    to_rate,
)

URL = "https://rates.example/v6/latest"


# ──────────────────────────────────────────────────────────────────────────────
#                               🧪 Вспомогалки
# ──────────────────────────────────────────────────────────────────────────────

def _source(handler, *, retries: int = 3, api_key=None) -> tuple[HttpRateSource, list]:
    """Збирає HttpRateSource поверх MockTransport і журналу запитів."""
    seen: list[httpx.Request] = []

    def _recording(request: httpx.Request):
        seen.append(request)
        return handler(request, len(seen))

    client = httpx.AsyncClient(transport=httpx.MockTransport(_recording))
    source = HttpRateSource(
        URL,
        api_key=api_key,
        retry_attempts=retries,
        retry_delay_sec=0,
        client=client,
    )
    return source, seen


# ──────────────────────────────────────────────────────────────────────────────
#                               🌐 HTTP-джерело
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_http_source_parses_rates():
    source, seen = _source(lambda req, n: httpx.Response(200, json={"result": "success", "rates": {"EUR": 0.85, "JPY": "110.2"}}))
    rates = await source.fetch_rates("USD")

    assert seen[0].url == httpx.URL(f"{URL}/USD")
    assert rates == {"EUR": Decimal("0.85"), "JPY": Decimal("110.2"), "USD": Decimal("1")}


@pytest.mark.asyncio
async def test_http_source_accepts_conversion_rates_and_drops_garbage():
    body = {"conversion_rates": {"eur": 0.9, "BAD": -1, "NAN": "nan", "ZERO": 0, "BOOL": True, "TXT": "x"}}
    source, _ = _source(lambda req, n: httpx.Response(200, json=body))
    rates = await source.fetch_rates("USD")
    assert rates == {"EUR": Decimal("0.9"), "USD": Decimal("1")}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"result": "error", "error-type": "unsupported-code"},
        {"rates": "nope"},
        {"rates": {"EUR": -1}},
        ["not", "an", "object"],
    ],
)
async def test_http_source_rejects_bad_payload(body):
    source, seen = _source(lambda req, n: httpx.Response(200, json=body))
    with pytest.raises(InvalidRateResponseError):
        await source.fetch_rates("USD")
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_http_source_invalid_json():
    source, seen = _source(lambda req, n: httpx.Response(200, content=b"<html>oops</html>"))
    with pytest.raises(InvalidRateResponseError):
        await source.fetch_rates("USD")
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_http_source_429_is_not_retried():
    source, seen = _source(lambda req, n: httpx.Response(429))
    with pytest.raises(RateLimitExceededError) as exc_info:
        await source.fetch_rates("USD")
    assert exc_info.value.message == "Rate limit exceeded - please wait"
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_http_source_404_maps_to_invalid_response():
    source, seen = _source(lambda req, n: httpx.Response(404))
    with pytest.raises(InvalidRateResponseError):
        await source.fetch_rates("USD")
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_http_source_retries_5xx_until_exhausted():
    source, seen = _source(lambda req, n: httpx.Response(503), retries=3)
    with pytest.raises(RateServerError):
        await source.fetch_rates("USD")
    assert len(seen) == 3


@pytest.mark.asyncio
async def test_http_source_recovers_after_transient_failure():
    def handler(request, attempt):
        if attempt == 1:
            return httpx.Response(502)
        return httpx.Response(200, json={"rates": {"EUR": 0.9}})

    source, seen = _source(handler)
    rates = await source.fetch_rates("USD")
    assert rates["EUR"] == Decimal("0.9")
    assert len(seen) == 2


@pytest.mark.asyncio
async def test_http_source_network_and_timeout_errors():
    def refuse(request, attempt):
        raise httpx.ConnectError("refused", request=request)

    def stall(request, attempt):
        raise httpx.ReadTimeout("stalled", request=request)

    source, seen = _source(refuse, retries=2)
    with pytest.raises(RateNetworkError):
        await source.fetch_rates("USD")
    assert len(seen) == 2

    source, seen = _source(stall, retries=2)
    with pytest.raises(RateTimeoutError):
        await source.fetch_rates("USD")
    assert len(seen) == 2


@pytest.mark.asyncio
async def test_http_source_sends_bearer_token_on_own_client(monkeypatch):
    captured = {}

    def handler(request):
        captured["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"rates": {"EUR": 1}})

    original = httpx.AsyncClient

    def _client(**kwargs):
        return original(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", _client)
    source = HttpRateSource(URL, api_key="secret", retry_delay_sec=0)
    await source.fetch_rates("USD")
    await source.close()

    assert captured["auth"] == "Bearer secret"


@pytest.mark.asyncio
async def test_http_source_does_not_close_injected_client():
    source, _ = _source(lambda req, n: httpx.Response(200, json={"rates": {"EUR": 1}}))
    client = source._client
    await source.close()
    assert client is not None and not client.is_closed
    await client.aclose()


def test_http_source_requires_url():
    with pytest.raises(ValueError):
        HttpRateSource("")


# ──────────────────────────────────────────────────────────────────────────────
#                               🗂️ Статичне джерело
# ──────────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_static_source_known_base():
    rates = await StaticRateSource().fetch_rates("USD")
    assert rates["EUR"] == Decimal("0.85235")
    assert rates["JPY"] == Decimal("110.234")
    assert rates["USD"] == Decimal("1")


@pytest.mark.asyncio
async def test_static_source_derives_missing_base():
    table = {"USD": {"CAD": "1.25", "EUR": "0.8"}}
    rates = await StaticRateSource(table).fetch_rates("CAD")

    assert rates["CAD"] == Decimal("1")
    assert rates["USD"] == Decimal("1") / Decimal("1.25")
    assert rates["EUR"] == Decimal("0.8") / Decimal("1.25")


@pytest.mark.asyncio
async def test_static_source_unknown_base_only_has_itself():
    rates = await StaticRateSource({"USD": {"EUR": "0.8"}}).fetch_rates("XAU")
    assert rates == {"XAU": Decimal("1")}


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1.5", Decimal("1.5")),
        (2, Decimal("2")),
        (0.25, Decimal("0.25")),
        (Decimal("3"), Decimal("3")),
        (0, None),
        (-1, None),
        ("inf", None),
        ("NaN", None),
        (True, None),
        (None, None),
        ("abc", None),
    ],
)
def test_to_rate(value, expected):
    assert to_rate(value) == expected
