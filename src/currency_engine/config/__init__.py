# ⚙️ currency_engine/config/__init__.py
"""⚙️ Конфігурація рушія конвертації (`ConfigService`)."""

from .config_service import ConfigService

__all__ = ["ConfigService"]
