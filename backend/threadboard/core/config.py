"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Load .env during development (no-op when the file is absent)
load_dotenv()


def env_bool(name: str, default: bool = False) -> bool:
    """Parse a boolean flag from an environment variable.

    Parameters
    ----------
    name: str
        Environment variable to inspect.
    default: bool, optional
        Value returned when the variable is unset. Defaults to ``False``.

    Returns
    -------
    bool
        ``True`` if the value resembles ``{"1", "true", "yes", "y", "on"}``
        ignoring case; otherwise ``False`` or ``default`` when missing.
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


def env_int(name: str, default: int) -> int:
    """Parse an integer from an environment variable, falling back to ``default``."""
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return int(val)


class BaseConfig:
    """Base configuration shared across environments.

    Attributes
    ----------
    API_BASE_PREFIX: str
        Root path for registering API blueprints.
    SECRET_KEY: str
        Flask secret used for session signing.
    ACCESS_TOKEN_SECRET: str
        Signing key for short-lived access tokens. Mirrored into
        ``JWT_SECRET_KEY`` so ``flask-jwt-extended`` verifies with it.
    JWT_ACCESS_TOKEN_EXPIRES: timedelta
        Access token lifetime.
    REFRESH_TOKEN_SECRET: str | None
        Independent signing key for refresh tokens. Left unset in the base
        class: a missing value is reported as a server fault at issue time.
    REFRESH_TOKEN_EXPIRES: timedelta
        Refresh token lifetime.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string consumed by SQLAlchemy.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    LOG_REQUESTS: bool
        Emit one ``request.completed`` line per request.
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    POST_PAGE_SIZE: int
        Page size of keyset-paginated post and comment listings.
    MAX_POST_FILES: int
        Upper bound of attachments per post.
    """

    API_BASE_PREFIX = "/api"

    # Secrets / security
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "CHANGE_ME_ACCESS")
    JWT_SECRET_KEY = ACCESS_TOKEN_SECRET
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(minutes=env_int("ACCESS_TOKEN_EXPIRES_MINUTES", 15))
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET")
    REFRESH_TOKEN_EXPIRES = timedelta(days=env_int("REFRESH_TOKEN_EXPIRES_DAYS", 7))

    # DB
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///./dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_REQUESTS = env_bool("LOG_REQUESTS", False)
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)

    # Content limits
    POST_PAGE_SIZE = 10
    MAX_POST_FILES = 10

    # Flask built-ins
    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development.

    Notes
    -----
    Enables debug mode and the per-request access log by default, and ships a
    placeholder refresh secret so the stack runs without a ``.env`` file.
    """

    DEBUG = env_bool("FLASK_DEBUG", True)
    LOG_REQUESTS = env_bool("LOG_REQUESTS", True)
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "CHANGE_ME_REFRESH")
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Forces ``TESTING`` mode and disables debug logs.
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Propagates exceptions so pytest can surface tracebacks directly.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "testing-refresh-secret")
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments.

    Notes
    -----
    Keeps debug and SQL echoing disabled. Secrets must come from the
    environment; the refresh secret has no fallback.
    """

    DEBUG = False
    SQLALCHEMY_ECHO = False
    PROPAGATE_EXCEPTIONS = False


CONFIG_MAP: Mapping[str, type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config() -> type[BaseConfig]:
    """Return the configuration class inferred from ``APP_ENV``.

    Falls back to :class:`DevelopmentConfig` when ``APP_ENV`` is unset or
    unknown.
    """
    name = os.getenv(ENV_VAR, "development").strip().lower()
    return CONFIG_MAP.get(name, DevelopmentConfig)
