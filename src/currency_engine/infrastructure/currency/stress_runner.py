# 🏋️ currency_engine/infrastructure/currency/stress_runner.py
"""
🏋️ Навантажувальний прогін конвертера.

🔹 Пачки по `min(concurrency, request_rate)` одночасних конверсій, пауза `1 / request_rate` с.
🔹 Тривалість обмежена `stress.max_duration_sec` (30 с за замовчуванням).
🔹 Скасування через `asyncio.Event`: пачка, що виконувалась у момент скасування,
    відкидається; агрегати оновлюються лише цілими пачками.
"""

from __future__ import annotations

# 🔠 Системні імпорти
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

# 🧩 Внутрішні модулі проєкту
from currency_engine.config.config_service import ConfigService
from currency_engine.domain.currency.interfaces import ConversionResult, IConversionService
from currency_engine.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)

DEFAULT_MAX_DURATION_SEC = 30.0


class StressTestStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# ================================
# 📊 АГРЕГАТИ
# ================================
@dataclass
class _Aggregate:
    """Накопичувач метрик; приймає лише завершені пачки."""

    total: int = 0
    successful: int = 0
    failed: int = 0
    response_times: List[float] = field(default_factory=list)

    def absorb(self, batch: Sequence[ConversionResult]) -> None:
        successful = sum(1 for result in batch if result.success)
        self.total += len(batch)
        self.successful += successful
        self.failed += len(batch) - successful
        self.response_times.extend(result.response_time_ms for result in batch)


@dataclass(frozen=True, slots=True)
class StressTestReport:
    """📊 Підсумок прогону."""

    status: StressTestStatus
    total_requests: int
    successful_requests: int
    failed_requests: int
    average_response_time_ms: float
    max_response_time_ms: float
    min_response_time_ms: float
    error_rate: float                                                   # 📉 Відсоток відмов
    throughput: float                                                   # 🚀 Запитів за секунду
    duration_sec: float
    started_at: datetime
    finished_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "totalRequests": self.total_requests,
            "successfulRequests": self.successful_requests,
            "failedRequests": self.failed_requests,
            "averageResponseTime": self.average_response_time_ms,
            "maxResponseTime": self.max_response_time_ms,
            "minResponseTime": self.min_response_time_ms,
            "errorRate": self.error_rate,
            "throughput": self.throughput,
            "duration": self.duration_sec,
            "startedAt": self.started_at.isoformat(),
            "finishedAt": self.finished_at.isoformat(),
        }


# ================================
# 🏋️ РАННЕР
# ================================
class StressTestRunner:
    """🏋️ Ганяє одну й ту саму конверсію пачками та збирає статистику."""

    def __init__(
        self,
        converter: IConversionService,
        config_service: Optional[ConfigService] = None,
        *,
        amount: Any = Decimal("100"),
        from_currency: str = "USD",
        to_currency: str = "EUR",
    ) -> None:
        self._converter = converter
        self._amount = amount
        self._from = from_currency
        self._to = to_currency
        configured = config_service.get("stress.max_duration_sec", DEFAULT_MAX_DURATION_SEC, cast=float) if config_service else None
        self._max_duration = float(configured or DEFAULT_MAX_DURATION_SEC)

    async def run(
        self,
        duration_sec: float,
        concurrency: int,
        request_rate: int,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> StressTestReport:
        """
        🚀 Запускає прогін.

        Args:
            duration_sec: Бажана тривалість (обрізається до `stress.max_duration_sec`).
            concurrency: Максимум одночасних запитів у пачці.
            request_rate: Цільова кількість запитів за секунду.
            cancel_event: Встановлений Event зупиняє прогін.
        """
        if concurrency <= 0 or request_rate <= 0:
            raise ValueError("concurrency and request_rate must be positive")
        if duration_sec < 0:
            raise ValueError("duration_sec must not be negative")

        event = cancel_event or asyncio.Event()
        loop = asyncio.get_running_loop()
        started_at = datetime.now(timezone.utc)
        started = loop.time()
        deadline = started + min(float(duration_sec), self._max_duration)
        batch_size = int(min(concurrency, request_rate))
        pause = 1.0 / float(request_rate)
        aggregate = _Aggregate()
        status = StressTestStatus.COMPLETED

        logger.info(
            "🏋️ Стрес-тест: %s→%s, batch=%d, pause=%.3fs, limit=%.1fs",
            self._from,
            self._to,
            batch_size,
            pause,
            deadline - started,
        )

        while loop.time() < deadline:
            if event.is_set():
                status = StressTestStatus.CANCELLED
                break

            batch = await self._run_batch(batch_size, event)
            if batch is None:
                status = StressTestStatus.CANCELLED
                break
            aggregate.absorb(batch)

            try:
                await asyncio.wait_for(event.wait(), timeout=pause)
            except asyncio.TimeoutError:
                continue
            status = StressTestStatus.CANCELLED
            break

        report = self._build_report(aggregate, status, started_at, loop.time() - started)
        logger.info(
            "📊 Стрес-тест %s: %d запитів, помилок %.2f%%, %.1f req/s",
            report.status.value,
            report.total_requests,
            report.error_rate,
            report.throughput,
        )
        return report

    async def _run_batch(self, size: int, event: asyncio.Event) -> Optional[List[ConversionResult]]:
        """Одна пачка; None, якщо її перервало скасування."""
        tasks = [
            asyncio.create_task(self._converter.convert(self._amount, self._from, self._to))
            for _ in range(size)
        ]
        gathered = asyncio.gather(*tasks)
        waiter = asyncio.create_task(event.wait())
        try:
            await asyncio.wait({gathered, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()

        if gathered.done():
            return list(gathered.result())

        gathered.cancel()
        await asyncio.wait(tasks)                                       # 🧹 Дочекатися скасування дочірніх задач
        logger.info("🛑 Пачку з %d запитів відкинуто через скасування", size)
        return None

    @staticmethod
    def _build_report(
        aggregate: _Aggregate,
        status: StressTestStatus,
        started_at: datetime,
        elapsed: float,
    ) -> StressTestReport:
        times = aggregate.response_times
        total = aggregate.total
        return StressTestReport(
            status=status,
            total_requests=total,
            successful_requests=aggregate.successful,
            failed_requests=aggregate.failed,
            average_response_time_ms=sum(times) / len(times) if times else 0.0,
            max_response_time_ms=max(times) if times else 0.0,
            min_response_time_ms=min(times) if times else 0.0,
            error_rate=(aggregate.failed / total) * 100 if total else 0.0,
            throughput=total / elapsed if elapsed > 0 else 0.0,
            duration_sec=elapsed,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )


__all__ = ["StressTestRunner", "StressTestReport", "StressTestStatus"]
