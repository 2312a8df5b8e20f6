# ⚙️ currency_engine/config/config_service.py
"""
⚙️ config_service.py — доступ до статичної конфігурації рушія.

🔹 Клас `ConfigService`:
- Збирає конфігурацію з пакетного config.yaml, опційного YAML-файлу користувача та .env.
- Надає єдиний метод .get() з крапковими ключами ('currency_api.ttl_sec').
- Працює як Singleton; `from_dict()` дає ізольований екземпляр (тести, вбудовування).
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
import yaml                                  # 📦 YAML-парсинг
from dotenv import load_dotenv              # 🔐 Змінні із .env

# 🔠 Системні імпорти
import copy                                 # 🧬 Глибокі копії словників
import logging                              # 🧾 Логування
import os                                   # 📁 Змінні середовища
from pathlib import Path                    # 📁 Шляхи до YAML
from typing import Any, Callable, Dict, Mapping, Optional

from currency_engine.shared.utils.logger import LOG_NAME

logger = logging.getLogger(LOG_NAME)

_PACKAGED_CONFIG = Path(__file__).parent / "config.yaml"     # 📘 Дефолти, що їдуть разом із пакетом
_USER_CONFIG_ENV = "CURRENCY_ENGINE_CONFIG"                  # 📁 Шлях до YAML користувача

# 🔐 Змінна середовища → крапковий ключ конфігурації
_ENV_KEYS: Dict[str, str] = {
    "CURRENCY_API_SOURCE": "currency_api.source",
    "CURRENCY_API_URL": "currency_api.url",
    "CURRENCY_API_KEY": "currency_api.api_key",
    "CURRENCY_LOG_LEVEL": "logging.level",
}


# ============================
# ⚙️ СЕРВІС ДОСТУПУ ДО КОНФІГІВ
# ============================
class ConfigService:
    """
    ⚙️ Надає доступ до всіх параметрів рушія конвертації.
    Конфігурація зчитується один раз на процес.
    """

    _instance: Optional["ConfigService"] = None                  # 🧩 Singleton-екземпляр
    _config: Dict[str, Any]                                      # 📦 Обʼєднана конфігурація (на екземплярі)

    def __new__(cls) -> "ConfigService":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._config = {}
            instance._load_all_configs()
            cls._instance = instance
            logger.debug("🔄 Singleton ConfigService створено і конфігурацію завантажено")
        return cls._instance

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, with_defaults: bool = True) -> "ConfigService":
        """
        🧪 Створює ізольований екземпляр (поза Singleton).

        Args:
            data: Вкладений словник, що перекриває дефолти.
            with_defaults: Чи підмішувати пакетний config.yaml.
        """
        instance = super().__new__(cls)
        instance._config = {}
        if with_defaults:
            instance._deep_update(instance._config, instance._read_yaml(_PACKAGED_CONFIG))
        instance._deep_update(instance._config, copy.deepcopy(dict(data)))
        return instance

    @classmethod
    def reset(cls) -> None:
        """♻️ Скидає Singleton (наступний виклик перечитає джерела)."""
        cls._instance = None

    def _load_all_configs(self) -> None:
        """
        📥 Завантажує всі джерела конфігурації в один словник.
        Пріоритет (наступне перекриває попереднє): config.yaml → $CURRENCY_ENGINE_CONFIG → .env
        """
        self._deep_update(self._config, self._read_yaml(_PACKAGED_CONFIG))

        user_path = os.getenv(_USER_CONFIG_ENV)
        if user_path:
            self._deep_update(self._config, self._read_yaml(Path(user_path)))

        load_dotenv()
        env_vars = {key: os.getenv(name) for name, key in _ENV_KEYS.items() if os.getenv(name)}
        self._deep_update(self._config, self._unflatten_dict(env_vars))

        logger.info("✅ Конфігурацію рушія завантажено.")

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        """📘 Читає YAML-файл; відсутній або битий файл → порожній словник із попередженням."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (FileNotFoundError, yaml.YAMLError) as e:
            logger.warning("⚠️ Не вдалося завантажити %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("⚠️ %s має містити словник верхнього рівня", path)
            return {}
        return data

    def get(self, key: str, default: Any = None, cast: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        🔑 Отримує значення за крапковим ключем.

        Args:
            key: Ключ на кшталт 'currency_api.timeout_sec'.
            default: Значення, якщо ключа немає.
            cast: Опційне приведення типу (int, float, ...). Невдале приведення → default.

        Returns:
            Any: Значення параметра або default.
        """
        value: Any = self._config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                logger.debug("❓ Ключ '%s' не знайдено, повертаємо default", key)
                return default
        if cast is not None and value is not None:
            try:
                return cast(value)
            except (TypeError, ValueError):
                logger.warning("⚠️ Ключ '%s' не приводиться до %s: %r", key, getattr(cast, "__name__", cast), value)
                return default
        return value

    def as_dict(self) -> Dict[str, Any]:
        """📤 Глибока копія всієї конфігурації."""
        return copy.deepcopy(self._config)

    # ===============================
    # 🔧 ДОПОМІЖНІ МЕТОДИ ЗЛИТТЯ КОНФІГІВ
    # ===============================
    @staticmethod
    def _unflatten_dict(d: Dict[str, Any]) -> Dict[str, Any]:
        """
        🔁 Перетворює ключі з крапками в ієрархічний словник.
        'currency_api.url' → {'currency_api': {'url': ...}}
        """
        result: Dict[str, Any] = {}
        for key, value in d.items():
            parts = key.split(".")
            node = result
            for part in parts[:-1]:
                node = node.setdefault(part, {})
            node[parts[-1]] = value
        return result

    def _deep_update(self, source: Dict[str, Any], overrides: Mapping[str, Any]) -> None:
        """🔁 Рекурсивно обʼєднує словники: вкладені dict зливаються, решта перезаписується."""
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(source.get(key), dict):
                self._deep_update(source[key], value)
            else:
                source[key] = value
