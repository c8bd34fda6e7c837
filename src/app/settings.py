from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Tuple

from src.app.errors import ConfigError

def _get_env(name: str, default: str | None = None) -> str:
    v = os.getenv(name, default)
    if v is None or v == "":
        raise ConfigError(f"Missing required env var: {name}")
    return v

def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name, str(default))
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e

def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name, str(default))
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e

@dataclass(frozen=True)
class Settings:
    # Storage
    store_backend: str = "json"
    chats_file: str = "chats.json"
    mongo_uri: str | None = None
    mongo_db: str = "almas_chat"

    # Cerebras
    cerebras_api_key: str | None = None
    cerebras_model: str = "llama-3.3-70b"
    generator_timeout_s: float = 30.0
    generator_max_retries: int = 0

    # Turn pipeline
    context_window: int = 12

    # HTTP
    cors_origins: Tuple[str, ...] = ("*",)
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

def load_settings() -> Settings:
    backend = os.getenv("SESSION_STORE", "json").lower().strip()
    if backend not in {"json", "mongo"}:
        raise ConfigError(f"SESSION_STORE must be 'json' or 'mongo', got {backend!r}")

    window = _get_int("CONTEXT_WINDOW", 12)
    if window < 1:
        raise ConfigError("CONTEXT_WINDOW must be >= 1")

    retries = _get_int("GENERATOR_MAX_RETRIES", 0)
    if retries < 0:
        raise ConfigError("GENERATOR_MAX_RETRIES must be >= 0")

    origins_raw = os.getenv("CORS_ORIGINS", "*")
    origins = tuple(o.strip() for o in origins_raw.split(",") if o.strip()) or ("*",)

    return Settings(
        store_backend=backend,
        chats_file=os.getenv("CHATS_FILE", "chats.json"),
        mongo_uri=_get_env("MONGO_URI") if backend == "mongo" else os.getenv("MONGO_URI"),
        mongo_db=os.getenv("MONGO_DB", "almas_chat"),
        cerebras_api_key=os.getenv("CEREBRAS_API_KEY"),
        cerebras_model=os.getenv("CEREBRAS_MODEL", "llama-3.3-70b"),
        generator_timeout_s=_get_float("GENERATOR_TIMEOUT_S", 30.0),
        generator_max_retries=retries,
        context_window=window,
        cors_origins=origins,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_get_int("PORT", 3000),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
