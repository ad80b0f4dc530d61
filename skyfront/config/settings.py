"""Application configuration with environment-based settings."""
import os
import logging
from typing import Optional
from dotenv import load_dotenv


_DEV_SECRET_KEY = "dev-secret-key-change-in-production"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Base configuration class following Single Responsibility Principle."""

    # Load environment variables
    load_dotenv()

    # Airline backend API
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8080/api")
    API_TIMEOUT: float = float(os.getenv("API_TIMEOUT", "10"))
    API_RETRY_TOTAL: int = int(os.getenv("API_RETRY_TOTAL", "3"))
    API_RETRY_BACKOFF: float = float(os.getenv("API_RETRY_BACKOFF", "0.5"))

    # Session storage (redis or memory)
    SESSION_STORAGE_TYPE: str = os.getenv("SESSION_STORAGE_TYPE", "redis").lower()
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    SESSION_TTL: int = int(os.getenv("SESSION_TTL", "86400"))  # 24 hours

    # Rate Limiting
    RATELIMIT_STORAGE_URL: str = os.getenv("RATELIMIT_STORAGE_URL", "redis://localhost:6379/2")
    RATELIMIT_ENABLED: bool = _env_bool("RATELIMIT_ENABLED", "true")
    RATELIMIT_DEFAULT: str = os.getenv("RATELIMIT_DEFAULT", "1000 per hour;200 per minute")
    RATELIMIT_AUTH: str = os.getenv("RATELIMIT_AUTH", "10 per minute")

    # Monitoring
    SENTRY_DSN: Optional[str] = os.getenv("SENTRY_DSN")
    ENABLE_METRICS: bool = _env_bool("ENABLE_METRICS", "true")

    # Application
    SERVICE_NAME: str = "skyfront"
    ENV_NAME: str = os.getenv("FLASK_ENV", "development").lower()
    DEBUG: bool = _env_bool("DEBUG", "false")
    TESTING: bool = False
    SECRET_KEY: str = os.getenv("SECRET_KEY", _DEV_SECRET_KEY)
    DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))

    # Flask session cookie (holds the opaque session id and the CSRF token)
    SESSION_COOKIE_HTTPONLY: bool = True
    SESSION_COOKIE_SAMESITE: str = "Lax"
    SESSION_COOKIE_SECURE: bool = _env_bool("SESSION_COOKIE_SECURE", "false")

    # CSRF tokens are bound to the session, not to a time window
    WTF_CSRF_ENABLED: bool = _env_bool("WTF_CSRF_ENABLED", "true")
    WTF_CSRF_TIME_LIMIT: Optional[int] = None

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration values."""
        if not cls.API_BASE_URL:
            raise ValueError("Missing required environment variable: API_BASE_URL")
        if not cls.DEBUG and cls.SECRET_KEY == _DEV_SECRET_KEY:
            logging.getLogger(__name__).warning(
                "SECRET_KEY is using the development default; set SECRET_KEY in production"
            )


class DevelopmentConfig(Config):
    """Development configuration."""
    ENV_NAME = "development"
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    ENV_NAME = "production"
    DEBUG = False
    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", "true")


class TestingConfig(Config):
    """Testing configuration."""
    ENV_NAME = "testing"
    TESTING = True
    SECRET_KEY = "test-secret-key"
    API_BASE_URL = "http://backend.test/api"
    API_RETRY_TOTAL = 0
    SESSION_STORAGE_TYPE = "memory"
    RATELIMIT_ENABLED = False
    WTF_CSRF_ENABLED = False
    ENABLE_METRICS = False
    SENTRY_DSN = None


def get_config() -> type[Config]:
    """Factory method to get configuration based on environment."""
    env = os.getenv("FLASK_ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }

    return config_map.get(env, DevelopmentConfig)
