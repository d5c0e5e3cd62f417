"""Environment-driven settings.

``APP_ENV`` picks one of :data:`CONFIG_MAP`; each value can be overridden
through an environment variable of the same name (``.env`` is loaded when
present).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Final
from urllib.parse import quote_plus

from dotenv import load_dotenv

ENV_VAR: Final[str] = "APP_ENV"  # development | testing | production

DEFAULT_SQLITE_URL: Final[str] = "sqlite:///./dev.db"
DEFAULT_PG_PORT: Final[int] = 5432

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})

load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Read a boolean flag; anything outside ``1/true/yes/y/on`` is ``False``."""
    raw = os.getenv(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Read an integer; unset or blank gives ``default``.

    Raises
    ------
    ValueError
        When the variable is set to something that is not an integer.
    """
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"invalid {name}: {raw!r}") from exc


def database_url_from_env(environ: Mapping[str, str] | None = None) -> str:
    """Resolve the SQLAlchemy URL.

    Parameters
    ----------
    environ: Mapping[str, str] | None
        Variables to read; :data:`os.environ` when omitted.

    Returns
    -------
    str
        ``DATABASE_URL`` verbatim when set. Otherwise, when ``DB_HOST`` is
        set, a psycopg2 URL built from ``DB_HOST``, ``DB_PORT``,
        ``DB_USER``, ``DB_PASSWORD``, ``DB_NAME`` and ``DB_SSL_MODE``.
        Otherwise :data:`DEFAULT_SQLITE_URL`.

    Raises
    ------
    ValueError
        When ``DB_PORT`` is not an integer.
    """
    env = os.environ if environ is None else environ
    if env.get("DATABASE_URL"):
        return env["DATABASE_URL"]

    host = env.get("DB_HOST")
    if not host:
        return DEFAULT_SQLITE_URL

    raw_port = env.get("DB_PORT") or str(DEFAULT_PG_PORT)
    try:
        port = int(raw_port)
    except ValueError as exc:
        raise ValueError(f"invalid DB_PORT: {raw_port!r}") from exc

    credentials = ":".join(
        quote_plus(env.get(key) or fallback)
        for key, fallback in (("DB_USER", "user"), ("DB_PASSWORD", "password"))
    )
    name = env.get("DB_NAME") or "mydb"
    sslmode = env.get("DB_SSL_MODE") or "disable"
    return f"postgresql+psycopg2://{credentials}@{host}:{port}/{name}?sslmode={sslmode}"


class BaseConfig:
    """Settings shared by every environment.

    Notes
    -----
    Values are read once, at import time.
    """

    API_BASE_PREFIX = "/api"
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")

    # Database
    SQLALCHEMY_DATABASE_URI = database_url_from_env()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)
    # Create missing tables on startup instead of running migrations
    AUTO_CREATE_SCHEMA = env_bool("AUTO_CREATE_SCHEMA", False)

    # Dev server port (gunicorn reads SERVER_PORT itself)
    SERVER_PORT = env_int("SERVER_PORT", 8080)

    # Listing: per_page used when missing/invalid, and the largest accepted
    DEFAULT_PER_PAGE = env_int("DEFAULT_PER_PAGE", 10)
    MAX_PER_PAGE = env_int("MAX_PER_PAGE", 100)

    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Comma-separated; "*" allows any origin without credentials
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    CORS_MAX_AGE = env_int("CORS_MAX_AGE", 600)

    # Trust X-Forwarded-* from PROXY_HOPS proxies
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXY_HOPS = env_int("PROXY_HOPS", 1)

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Local development: debug on, tables created at startup."""

    APP_ENV = "development"
    DEBUG = env_bool("FLASK_DEBUG", True)
    AUTO_CREATE_SCHEMA = env_bool("AUTO_CREATE_SCHEMA", True)


class TestingConfig(BaseConfig):
    """pytest runs.

    In-memory SQLite unless ``TEST_DATABASE_URL`` is set. The fixtures
    create the schema themselves, and unhandled exceptions propagate to the
    test.
    """

    APP_ENV = "testing"
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    AUTO_CREATE_SCHEMA = False
    USE_PROXYFIX = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Deployments: schema changes go through ``flask db upgrade``."""

    APP_ENV = "production"
    SQLALCHEMY_ECHO = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Config class named by ``APP_ENV``; :class:`DevelopmentConfig` when unset or unknown."""
    return CONFIG_MAP.get(os.getenv(ENV_VAR, "development").strip().lower(), DevelopmentConfig)
