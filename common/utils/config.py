"""Runtime configuration helpers for the classroom board backend."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional, Tuple

_TRUTHY = ("1", "true", "yes")

# Bundled quiz catalog, used as both seed data and the default file backend
DEFAULT_QUIZ_FILE = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "server", "models", "quizzes.json")
)


def _split_origins(raw: str) -> Tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


@dataclass(frozen=True)
class Settings:
    """Immutable application configuration loaded from the environment."""

    debug: bool
    host: str
    port: int
    log_level: str
    cors_origins: Tuple[str, ...]
    # MongoDB configuration (database mode is enabled only when a URI is set)
    mongo_uri: Optional[str]
    mongo_db_name: str
    mongo_collection: str
    mongo_timeout_ms: int
    mongo_connect_retries: int
    # File backend and seed data
    quiz_data_file: str
    quiz_seed_file: str
    enforce_unique_quiz_ids: bool
    # WebSocket configuration
    socketio_async_mode: str
    websocket_ping_interval: int
    websocket_ping_timeout: int

    @property
    def database_configured(self) -> bool:
        return bool(self.mongo_uri)

    @property
    def socketio_cors_origins(self):
        """Origins in the shape python-socketio expects ("*" or a list)."""
        if self.cors_origins == ("*",):
            return "*"
        return list(self.cors_origins)

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        return Settings(

            # toggle Flask debugger (disabled in prod)
            debug=env.get("FLASK_DEBUG", "false").lower() in _TRUTHY,
            host=env.get("FLASK_HOST", "0.0.0.0"),  # nosec B104 - Required for containerized deployment
            port=int(env.get("PORT", "4000")),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            cors_origins=_split_origins(env.get("ALLOW_ORIGIN", "*")) or ("*",),

            # mongo configuration (optional - file fallback when empty)
            mongo_uri=env.get("MONGO_URI") or None,
            mongo_db_name=env.get("MONGO_DB_NAME", "classboard"),
            mongo_collection=env.get("MONGO_COLLECTION", "quizzes"),
            mongo_timeout_ms=int(env.get("MONGO_TIMEOUT_MS", "5000")),
            mongo_connect_retries=max(1, int(env.get("MONGO_CONNECT_RETRIES", "1"))),

            # quiz catalog files
            quiz_data_file=env.get("QUIZ_DATA_FILE") or DEFAULT_QUIZ_FILE,
            quiz_seed_file=env.get("QUIZ_SEED_FILE") or DEFAULT_QUIZ_FILE,
            enforce_unique_quiz_ids=env.get("ENFORCE_UNIQUE_QUIZ_IDS", "false").lower()
            in _TRUTHY,

            # websocket configuration
            socketio_async_mode=env.get("SOCKETIO_ASYNC_MODE", "eventlet"),
            websocket_ping_interval=int(env.get("WEBSOCKET_PING_INTERVAL", "25")),
            websocket_ping_timeout=int(env.get("WEBSOCKET_PING_TIMEOUT", "60")),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings loaded from environment variables."""

    return Settings.from_env()
