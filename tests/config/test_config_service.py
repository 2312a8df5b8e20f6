"""
🧪 test_config_service.py — unit-тести для ConfigService

Перевіряє:
- Пакетні дефолти (config.yaml)
- Крапкові ключі, default і cast
- Перекриття з YAML користувача та змінних середовища
- Singleton і ізольовані екземпляри from_dict()
"""

import pytest

from currency_engine.config.config_service import ConfigService


@pytest.fixture
def fresh_singleton(monkeypatch, tmp_path):
    """Скидає Singleton і ізолює оточення від реального .env."""
    monkeypatch.chdir(tmp_path)
    for name in ("CURRENCY_ENGINE_CONFIG", "CURRENCY_API_SOURCE", "CURRENCY_API_URL", "CURRENCY_API_KEY", "CURRENCY_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    ConfigService.reset()
    yield
    ConfigService.reset()


def test_packaged_defaults():
    cfg = ConfigService.from_dict({})
    assert cfg.get("currency_api.source") == "static"
    assert cfg.get("currency_api.ttl_sec", cast=float) == 600.0
    assert cfg.get("currency.rounding") == "ROUND_HALF_EVEN"
    assert cfg.get("stress.max_duration_sec") == 30
    assert cfg.get("metrics.prometheus.port") == 0


def test_get_default_and_cast():
    cfg = ConfigService.from_dict({"currency_api": {"timeout_sec": "2.5", "retry_attempts": "many"}})
    assert cfg.get("currency_api.timeout_sec", cast=float) == 2.5
    assert cfg.get("currency_api.retry_attempts", 3, cast=int) == 3
    assert cfg.get("missing.key", "fallback") == "fallback"
    assert cfg.get("currency_api.url.deeper") is None


def test_from_dict_without_defaults_is_isolated():
    data = {"currency": {"supported": ["USD"]}}
    cfg = ConfigService.from_dict(data, with_defaults=False)
    data["currency"]["supported"].append("EUR")

    assert cfg.get("currency.supported") == ["USD"]
    assert cfg.get("currency_api.source") is None
    assert cfg.as_dict() == {"currency": {"supported": ["USD"]}}


def test_deep_merge_keeps_sibling_keys():
    cfg = ConfigService.from_dict({"currency_api": {"source": "http"}})
    assert cfg.get("currency_api.source") == "http"
    assert cfg.get("currency_api.url") == "https://open.er-api.com/v6/latest"


def test_singleton_reads_user_yaml_and_env(fresh_singleton, monkeypatch, tmp_path):
    user_yaml = tmp_path / "engine.yaml"
    user_yaml.write_text("currency_api:\n  ttl_sec: 60\nstress:\n  max_duration_sec: 5\n", encoding="utf-8")
    monkeypatch.setenv("CURRENCY_ENGINE_CONFIG", str(user_yaml))
    monkeypatch.setenv("CURRENCY_API_SOURCE", "http")
    monkeypatch.setenv("CURRENCY_API_KEY", "token-123")

    service = ConfigService()

    assert service is ConfigService()
    assert service.get("currency_api.ttl_sec") == 60
    assert service.get("stress.max_duration_sec") == 5
    assert service.get("currency_api.source") == "http"
    assert service.get("currency_api.api_key") == "token-123"
    assert service.get("currency_api.timeout_sec") == 5


def test_broken_user_yaml_is_ignored(fresh_singleton, monkeypatch, tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("currency_api: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("CURRENCY_ENGINE_CONFIG", str(broken))

    assert ConfigService().get("currency_api.source") == "static"


def test_unflatten_dict():
    assert ConfigService._unflatten_dict({"a.b.c": 1, "a.d": 2, "e": 3}) == {"a": {"b": {"c": 1}, "d": 2}, "e": 3}
