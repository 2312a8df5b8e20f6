"""
🧪 test_stress_runner.py — навантажувальний прогін конвертера

Перевіряє:
- Завершення прогону та агрегати цілими пачками
- Скасування через asyncio.Event (пачка в польоті відкидається)
- Обмеження тривалості через stress.max_duration_sec
- Відмову на некоректних параметрах
"""

import asyncio
from datetime import timezone
from decimal import Decimal

import pytest

from currency_engine.domain.currency.interfaces import ConversionResult
from currency_engine.infrastructure.currency.stress_runner import (
    StressTestRunner,
    StressTestStatus,
)


class _StubConverter:
    """Конвертер із керованою затримкою та результатом."""

    def __init__(self, *, delay: float = 0.0, success: bool = True):
        self.delay = delay
        self.success = success
        self.calls = 0

    async def convert(self, amount, from_currency, to_currency) -> ConversionResult:
        self.calls += 1
        await asyncio.sleep(self.delay)
        if self.success:
            return ConversionResult(
                success=True,
                converted_amount=Decimal("85.24"),
                exchange_rate=Decimal("0.8524"),
                precision=2,
                response_time_ms=self.delay * 1000,
            )
        return ConversionResult(success=False, error="Server error - please try again later", response_time_ms=1.0)


@pytest.mark.asyncio
async def test_run_completes_with_whole_batches():
    runner = StressTestRunner(_StubConverter(delay=0.001))
    report = await runner.run(duration_sec=0.2, concurrency=5, request_rate=50)

    assert report.status is StressTestStatus.COMPLETED
    assert report.total_requests > 0
    assert report.total_requests % 5 == 0
    assert report.successful_requests == report.total_requests
    assert report.failed_requests == 0
    assert report.error_rate == 0.0
    assert report.throughput > 0
    assert report.min_response_time_ms <= report.average_response_time_ms <= report.max_response_time_ms


@pytest.mark.asyncio
async def test_batch_size_is_bounded_by_rate():
    converter = _StubConverter()
    runner = StressTestRunner(converter)
    report = await runner.run(duration_sec=0.05, concurrency=100, request_rate=3)

    assert report.total_requests % 3 == 0
    assert converter.calls == report.total_requests


@pytest.mark.asyncio
async def test_failures_are_counted():
    runner = StressTestRunner(_StubConverter(success=False))
    report = await runner.run(duration_sec=0.05, concurrency=2, request_rate=20)

    assert report.total_requests > 0
    assert report.successful_requests == 0
    assert report.error_rate == 100.0


@pytest.mark.asyncio
async def test_cancel_discards_batch_in_flight():
    converter = _StubConverter(delay=0.2)
    runner = StressTestRunner(converter)
    cancel = asyncio.Event()
    asyncio.get_running_loop().call_later(0.05, cancel.set)

    report = await runner.run(duration_sec=5, concurrency=4, request_rate=10, cancel_event=cancel)

    assert report.status is StressTestStatus.CANCELLED
    assert converter.calls == 4
    assert report.total_requests == 0
    assert report.duration_sec < 1


@pytest.mark.asyncio
async def test_cancel_between_batches_keeps_completed_work():
    runner = StressTestRunner(_StubConverter())
    cancel = asyncio.Event()
    asyncio.get_running_loop().call_later(0.15, cancel.set)

    report = await runner.run(duration_sec=5, concurrency=2, request_rate=10, cancel_event=cancel)

    assert report.status is StressTestStatus.CANCELLED
    assert report.total_requests > 0
    assert report.total_requests % 2 == 0
    assert report.duration_sec < 1


@pytest.mark.asyncio
async def test_pre_set_event_runs_nothing():
    converter = _StubConverter()
    cancel = asyncio.Event()
    cancel.set()

    report = await StressTestRunner(converter).run(1, 1, 1, cancel_event=cancel)

    assert report.status is StressTestStatus.CANCELLED
    assert converter.calls == 0
    assert report.to_dict()["totalRequests"] == 0


@pytest.mark.asyncio
async def test_duration_is_capped_by_config(make_config):
    cfg = make_config(stress={"max_duration_sec": 0.1})
    runner = StressTestRunner(_StubConverter(), cfg)

    report = await runner.run(duration_sec=60, concurrency=1, request_rate=20)

    assert report.status is StressTestStatus.COMPLETED
    assert report.duration_sec < 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "duration, concurrency, rate",
    [(1, 0, 10), (1, 10, 0), (1, -1, 10), (-1, 1, 1)],
)
async def test_invalid_parameters(duration, concurrency, rate):
    with pytest.raises(ValueError):
        await StressTestRunner(_StubConverter()).run(duration, concurrency, rate)


@pytest.mark.asyncio
async def test_report_to_dict():
    report = await StressTestRunner(_StubConverter()).run(0.02, 1, 50)
    payload = report.to_dict()
    assert payload["status"] == "completed"
    assert set(payload) >= {"totalRequests", "errorRate", "throughput", "averageResponseTime", "duration"}


@pytest.mark.asyncio
async def test_report_times_are_utc_aware():
    report = await StressTestRunner(_StubConverter()).run(0.02, 1, 50)

    assert report.started_at.tzinfo is timezone.utc
    assert report.finished_at.tzinfo is timezone.utc
    assert report.finished_at >= report.started_at
    assert report.to_dict()["startedAt"].endswith("+00:00")
