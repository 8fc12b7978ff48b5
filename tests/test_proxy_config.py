"""Tests for conditional ProxyFix wrapping."""

from unittest.mock import patch

from werkzeug.middleware.proxy_fix import ProxyFix

from app import config_by_name


def test_testing_app_does_not_wrap_proxy_by_default(app):
    assert not isinstance(app.wsgi_app, ProxyFix)


def _production_app(monkeypatch):
    monkeypatch.delenv("WEB_CONCURRENCY", raising=False)
    with patch("app.upgrade"), patch("app._configure_logging"):
        from app import create_app

        return create_app("production")


def test_production_app_wraps_proxy_when_trusted(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "StrongProductionKey0123456789ABCDEF")
    monkeypatch.setattr(config_by_name["production"], "TRUST_PROXY", True)

    prod_app = _production_app(monkeypatch)

    assert isinstance(prod_app.wsgi_app, ProxyFix)


def test_production_app_can_disable_proxy_trust(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "StrongProductionKey0123456789ABCDEF")
    monkeypatch.setattr(config_by_name["production"], "TRUST_PROXY", False)

    prod_app = _production_app(monkeypatch)

    assert not isinstance(prod_app.wsgi_app, ProxyFix)
