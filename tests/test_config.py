import importlib

from flask import Flask

from qrfeedback import config, extensions


def test_empty_redis_url_disables_the_cache(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "")
    try:
        importlib.reload(config)
        assert config.Config.REDIS_URL == ""

        app = Flask(__name__)
        app.config.from_object(config.Config)
        extensions.init_redis(app)
        assert extensions.redis_client is None
        assert extensions.cache_state() == "disabled"
    finally:
        monkeypatch.delenv("REDIS_URL")
        importlib.reload(config)


def test_unset_redis_url_defaults_to_local(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    importlib.reload(config)
    assert config.Config.REDIS_URL == "redis://localhost:6379/0"
