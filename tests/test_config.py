"""Configuration hardening tests."""

import pytest

from app.config import ProductionConfig


class _DummyApp:
    logger = None


@pytest.fixture()
def production_env(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "StrongProductionKey0123456789ABCDEF")
    monkeypatch.delenv("WEB_CONCURRENCY", raising=False)
    monkeypatch.delenv("RATELIMIT_STORAGE_URI", raising=False)
    return monkeypatch


def test_production_accepts_strong_secret_key(production_env):
    # Should not raise.
    ProductionConfig.init_app(_DummyApp())


def test_production_requires_secret_key(production_env):
    production_env.delenv("SECRET_KEY")
    with pytest.raises(RuntimeError, match="SECRET_KEY environment variable must be set"):
        ProductionConfig.init_app(_DummyApp())


def test_production_rejects_short_secret_key(production_env):
    production_env.setenv("SECRET_KEY", "too-short")
    with pytest.raises(RuntimeError, match="SECRET_KEY is too short"):
        ProductionConfig.init_app(_DummyApp())


def test_production_rejects_placeholder_secret_key(production_env):
    production_env.setenv("SECRET_KEY", "change-this-secret-key-0123456789")
    with pytest.raises(RuntimeError, match="SECRET_KEY appears to be a placeholder"):
        ProductionConfig.init_app(_DummyApp())


def test_production_rejects_non_integer_web_concurrency(production_env):
    production_env.setenv("WEB_CONCURRENCY", "many")
    with pytest.raises(RuntimeError, match="WEB_CONCURRENCY must be an integer"):
        ProductionConfig.init_app(_DummyApp())


def test_production_rejects_zero_web_concurrency(production_env):
    production_env.setenv("WEB_CONCURRENCY", "0")
    with pytest.raises(RuntimeError, match="WEB_CONCURRENCY must be at least 1"):
        ProductionConfig.init_app(_DummyApp())


def test_production_rejects_multiple_workers_with_memory_limiter(production_env):
    production_env.setenv("WEB_CONCURRENCY", "4")
    with pytest.raises(RuntimeError, match="RATELIMIT_STORAGE_URI is in-memory"):
        ProductionConfig.init_app(_DummyApp())


def test_production_allows_multiple_workers_with_shared_limiter(production_env):
    production_env.setenv("WEB_CONCURRENCY", "4")
    production_env.setenv("RATELIMIT_STORAGE_URI", "redis://localhost:6379/0")
    ProductionConfig.init_app(_DummyApp())


def test_env_driven_defaults(monkeypatch):
    import importlib

    import app.config as config_module

    monkeypatch.delenv("TRUST_PROXY", raising=False)
    monkeypatch.setenv("DEFAULT_CURRENCY", "eur")
    monkeypatch.setenv("SETUP_ENABLED", "False")
    reloaded = importlib.reload(config_module)
    try:
        assert reloaded.Config.TRUST_PROXY is False
        assert reloaded.ProductionConfig.TRUST_PROXY is True
        assert reloaded.Config.DEFAULT_CURRENCY == "EUR"
        assert reloaded.Config.SETUP_ENABLED is False
    finally:
        monkeypatch.undo()
        importlib.reload(config_module)
