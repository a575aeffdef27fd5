"""Tests for configuration loading via main.py entrypoint."""
import importlib
import sys

import pytest


def load_app(monkeypatch, env):
    for key, value in env.items():
        if value is None:
            monkeypatch.delenv(key, raising=False)
        else:
            monkeypatch.setenv(key, value)
    # Reload modules with updated environment
    for module in ['main', 'app.config']:
        if module in sys.modules:
            del sys.modules[module]
    main = importlib.import_module('main')
    return main.app


def test_testing_config_uses_memory_db(monkeypatch):
    app = load_app(monkeypatch, {'APP_ENV': 'testing'})
    assert app.config['TESTING'] is True
    assert app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite://')
    assert app.config['RATELIMIT_ENABLED'] is False


def test_development_defaults(monkeypatch):
    app = load_app(monkeypatch, {
        'APP_ENV': 'development',
        'DATABASE_URL': None,
    })
    assert app.config['DEBUG'] is True
    assert app.config['SQLALCHEMY_DATABASE_URI'] == 'sqlite:///dev.db'
    assert app.config['COD_ORDER_LIMIT'] == 50000
    assert app.config['PASSWORD_RESET_TOKEN_TTL_MIN'] == 60


def test_production_requires_secrets(monkeypatch):
    monkeypatch.setenv('APP_ENV', 'production')
    monkeypatch.delenv('SECRET_KEY', raising=False)
    monkeypatch.delenv('DATABASE_URL', raising=False)
    monkeypatch.delenv('JWT_SECRET', raising=False)
    if 'app.config' in sys.modules:
        del sys.modules['app.config']
    config = importlib.import_module('app.config')
    with pytest.raises(RuntimeError) as exc:
        config.get_config_class()
    assert 'JWT_SECRET' in str(exc.value)
