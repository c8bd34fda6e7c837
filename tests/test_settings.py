import json
import logging

import pytest

from src.app.errors import ConfigError
from src.app.logging import JsonFormatter
from src.app.settings import load_settings

ENV_VARS = [
    "SESSION_STORE", "CHATS_FILE", "MONGO_URI", "MONGO_DB", "CEREBRAS_API_KEY", "CEREBRAS_MODEL",
    "GENERATOR_TIMEOUT_S", "GENERATOR_MAX_RETRIES", "CONTEXT_WINDOW", "CORS_ORIGINS", "HOST", "PORT", "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = load_settings()
    assert s.store_backend == "json"
    assert s.chats_file == "chats.json"
    assert s.context_window == 12
    assert s.generator_max_retries == 0
    assert s.cors_origins == ("*",)
    assert s.port == 3000


def test_overrides(monkeypatch):
    monkeypatch.setenv("CONTEXT_WINDOW", "6")
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("GENERATOR_TIMEOUT_S", "2.5")
    monkeypatch.setenv("CEREBRAS_API_KEY", "k")

    s = load_settings()
    assert s.context_window == 6
    assert s.cors_origins == ("http://a.test", "http://b.test")
    assert s.generator_timeout_s == 2.5
    assert s.cerebras_api_key == "k"


def test_mongo_backend_requires_uri(monkeypatch):
    monkeypatch.setenv("SESSION_STORE", "mongo")
    with pytest.raises(ConfigError):
        load_settings()

    monkeypatch.setenv("MONGO_URI", "mongodb://localhost:27017")
    assert load_settings().mongo_uri == "mongodb://localhost:27017"


@pytest.mark.parametrize(
    "name, value",
    [("SESSION_STORE", "redis"), ("CONTEXT_WINDOW", "0"), ("PORT", "abc"), ("GENERATOR_MAX_RETRIES", "-1")],
)
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigError):
        load_settings()


def test_json_formatter_merges_fields():
    record = logging.LogRecord("almas.test", logging.INFO, __file__, 1, "turn %s", ("done",), None)
    record.fields = {"chat_id": "chat_1", "mode": "exam"}

    payload = json.loads(JsonFormatter().format(record))
    assert payload["msg"] == "turn done"
    assert payload["level"] == "INFO"
    assert payload["chat_id"] == "chat_1"
    assert payload["mode"] == "exam"
