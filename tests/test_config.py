import logging

from flask import Flask

import pizzapi
from pizzapi.config import get_config, is_debug
from pizzapi.links import api_base_url


def test_class_defaults(monkeypatch) -> None:
    monkeypatch.delenv("API_PREFIX", raising=False)
    monkeypatch.delenv("SQLALCHEMY_DATABASE_URI", raising=False)
    assert get_config("API_PREFIX") == "/v1"
    assert get_config("SQLALCHEMY_DATABASE_URI") == "sqlite:///pizzapi.sqlite"


def test_environment_overrides_defaults(monkeypatch) -> None:
    monkeypatch.setenv("API_PREFIX", "/api/")
    assert get_config("API_PREFIX") == "/api/"
    assert api_base_url() == "/api"


def test_app_config_first(monkeypatch) -> None:
    monkeypatch.setenv("API_PREFIX", "/api")
    app = Flask(__name__)
    app.config["API_PREFIX"] = "/v2"
    with app.app_context():
        assert get_config("API_PREFIX") == "/v2"
        assert get_config("API_HOST") == "localhost"


def test_unknown_option() -> None:
    assert get_config("pizzapi_unknown_option") is None
    assert get_config("pizzapi_unknown_option", "oven") == "oven"


def test_is_debug(monkeypatch) -> None:
    monkeypatch.setattr(pizzapi.log, "getEffectiveLevel", lambda: logging.DEBUG)
    assert is_debug()
    monkeypatch.setattr(pizzapi.log, "getEffectiveLevel", lambda: logging.WARNING)
    assert not is_debug()
