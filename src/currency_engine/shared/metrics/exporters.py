# 🚀 currency_engine/shared/metrics/exporters.py
"""🚀 Ледачий запуск HTTP-експортера Prometheus (`/metrics`)."""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from prometheus_client import start_http_server                       # 🌐 Вбудований експортер

# 🔠 Системні імпорти
import logging
import threading

from currency_engine.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)

_started_port: int | None = None
_lock = threading.Lock()


def maybe_start_prometheus(port: int | None) -> bool:
    """
    Піднімає експортер на `port`, якщо він ще не запущений.

    Returns:
        bool: True, якщо експортер запущено цим викликом.
    """
    global _started_port
    if not port or port <= 0:
        logger.debug("📈 Prometheus-експортер вимкнено (port=%s)", port)
        return False
    with _lock:
        if _started_port is not None:
            logger.debug("📈 Експортер уже працює на порту %s", _started_port)
            return False
        start_http_server(int(port))
        _started_port = int(port)
    logger.info("📈 Prometheus-експортер запущено на порту %s", port)
    return True
