"""Application settings with environment-based simple classes."""

from __future__ import annotations

import os
from collections.abc import Mapping
from datetime import timedelta
from typing import Final

from dotenv import load_dotenv

# Public selector env var
ENV_VAR: Final[str] = "APP_ENV"  # 'development' | 'testing' | 'production'

# Loads .env during development (no-op when the file is missing)
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
    JWT_SECRET_KEY: str
        Symmetric secret signing access tokens. Read from ``JWT_SECRET_KEY`` or
        the legacy ``JWT_SECRET`` variable. An empty value makes every issuance
        fail with ``SigningError``.
    JWT_ALGORITHM: str
        Signature algorithm shared by the issuer and ``flask-jwt-extended``.
    ACCESS_TOKEN_TTL: timedelta
        Access token lifetime (15 minutes unless overridden).
    BCRYPT_ROUNDS: int
        bcrypt cost factor used when hashing refresh tokens.
    REFRESH_TOKEN_BACKEND: str
        ``"sql"`` (default) or ``"redis"``.
    REFRESH_TOKEN_SINGLE_ACTIVE: bool
        When ``True`` persisting a refresh token removes the user's older records.
    REFRESH_TOKEN_MAX_AGE_DAYS: int
        Default age threshold for ``flask refresh-tokens sweep``.
    SQLALCHEMY_DATABASE_URI: str
        Database connection string (``DATABASE_URL`` or ``DB_CONN``).
    REDIS_URL: str | None
        Redis connection URL; required when the Redis backend is selected.
    LOG_LEVEL: str
        Root logging verbosity (``INFO`` by default).
    CORS_ORIGINS: str
        Comma-separated list of allowed origins for CORS.
    """

    API_BASE_PREFIX = "/api"
    APP_VERSION = os.getenv("APP_VERSION", "dev")

    # Secrets / signing
    SECRET_KEY = os.getenv("SECRET_KEY", "CHANGE_ME")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY") or os.getenv("JWT_SECRET", "")
    JWT_ALGORITHM = "HS512"
    ACCESS_TOKEN_TTL = timedelta(minutes=env_int("ACCESS_TOKEN_TTL_MINUTES", 15))
    JWT_ACCESS_TOKEN_EXPIRES = ACCESS_TOKEN_TTL

    # Refresh tokens
    BCRYPT_ROUNDS = env_int("BCRYPT_ROUNDS", 10)
    REFRESH_TOKEN_BACKEND = os.getenv("REFRESH_TOKEN_BACKEND", "sql").strip().lower()
    REFRESH_TOKEN_SINGLE_ACTIVE = env_bool("REFRESH_TOKEN_SINGLE_ACTIVE", False)
    REFRESH_TOKEN_MAX_AGE_DAYS = env_int("REFRESH_TOKEN_MAX_AGE_DAYS", 30)

    # DB
    SQLALCHEMY_DATABASE_URI = (
        os.getenv("DATABASE_URL") or os.getenv("DB_CONN") or "sqlite:///./dev.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = env_bool("SQLALCHEMY_ECHO", False)

    # Redis (optional)
    REDIS_URL = os.getenv("REDIS_URL") or None

    # Flask & JSON
    JSON_SORT_KEYS = False
    PROPAGATE_EXCEPTIONS = False

    # Logging, proxy & CORS
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    USE_PROXYFIX = env_bool("USE_PROXYFIX", True)
    PROXYFIX_X_FOR = env_int("PROXYFIX_X_FOR", 1)
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173")

    DEBUG = False
    TESTING = False


class DevelopmentConfig(BaseConfig):
    """Configuration tailored for local development."""

    DEBUG = env_bool("FLASK_DEBUG", True)
    CORS_MAX_AGE = 600  # 10 minutes


class TestingConfig(BaseConfig):
    """Configuration for automated test runs.

    Notes
    -----
    - Uses an in-memory SQLite database unless ``TEST_DATABASE_URL`` is set.
    - Drops the bcrypt cost to the library minimum so suites stay fast.
    - Disables ``ProxyFix`` so the test client address is used verbatim.
    """

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URL", "sqlite:///:memory:")
    JWT_SECRET_KEY = "testing-secret-" + "x" * 64
    BCRYPT_ROUNDS = 4
    REFRESH_TOKEN_BACKEND = "sql"
    REDIS_URL = None
    USE_PROXYFIX = False
    PROPAGATE_EXCEPTIONS = True


class ProductionConfig(BaseConfig):
    """Configuration defaults for production deployments."""

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
