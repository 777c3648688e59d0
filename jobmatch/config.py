"""
Environment-driven configuration.

Resolve the active configuration class with :func:`get_config`, which reads
``APP_ENV``. Production settings fail fast with a ``ConfigurationError``
instead of silently booting with development fallbacks.
"""

import os
from datetime import timedelta
from urllib.parse import urlparse


class ConfigurationError(Exception):
    """
    Raised when an invalid or unsupported configuration is requested.
    """
    pass


class BaseConfig:
    """
    Base configuration shared by all environments.
    """

    # Flask
    DEBUG = False
    TESTING = False
    ENVIRONMENT = "development"
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

    APP_NAME = "JobMatch"
    APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

    # Database
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///jobmatch.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Auth
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv("JWT_ACCESS_HOURS", "12")))
    JWT_TOKEN_LOCATION = ["headers"]
    JWT_ERROR_MESSAGE_KEY = "error"

    # CORS
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_REQUESTS = os.getenv("LOG_REQUESTS", "false").lower() == "true"
    SENTRY_DSN = os.getenv("SENTRY_DSN")

    # Stripe
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
    STRIPE_PUBLISHABLE_KEY = os.getenv("STRIPE_PUBLISHABLE_KEY", "")
    STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "")
    STRIPE_WEBHOOK_TOLERANCE = int(os.getenv("STRIPE_WEBHOOK_TOLERANCE", "300"))

    # Paystack
    PAYSTACK_SECRET_KEY = os.getenv("PAYSTACK_SECRET_KEY", "")
    PAYSTACK_PUBLIC_KEY = os.getenv("PAYSTACK_PUBLIC_KEY", "")
    PAYSTACK_BASE_URL = os.getenv("PAYSTACK_BASE_URL", "https://api.paystack.co")
    PAYSTACK_CALLBACK_URL = os.getenv("PAYSTACK_CALLBACK_URL", "")
    PROVIDER_TIMEOUT_SECONDS = int(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10"))

    # Uploads
    MAX_CONTENT_LENGTH = 5 * 1024 * 1024


class DevelopmentConfig(BaseConfig):
    """
    Development configuration.
    """

    DEBUG = True
    ENVIRONMENT = "development"


class TestingConfig(BaseConfig):
    """
    Test configuration: in-memory database and fixed provider secrets.
    """

    TESTING = True
    ENVIRONMENT = "testing"
    SECRET_KEY = "test-secret-key"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    SQLALCHEMY_DATABASE_URI = os.getenv("TEST_DATABASE_URI", "sqlite:///:memory:")

    STRIPE_SECRET_KEY = "sk_test_mock"
    STRIPE_PUBLISHABLE_KEY = "pk_test_mock"
    STRIPE_WEBHOOK_SECRET = "whsec_test_secret"
    PAYSTACK_SECRET_KEY = "sk_test_paystack"
    PAYSTACK_PUBLIC_KEY = "pk_test_paystack"


class ProductionConfig(BaseConfig):
    """
    Production configuration.

    Secrets MUST be set via environment variables; see :meth:`validate`.
    """

    DEBUG = False
    ENVIRONMENT = "production"

    REQUIRED = (
        "SECRET_KEY",
        "DATABASE_URL",
        "STRIPE_WEBHOOK_SECRET",
        "PAYSTACK_SECRET_KEY",
    )

    @classmethod
    def validate(cls):
        missing = [name for name in cls.REQUIRED if not os.getenv(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required production settings: {', '.join(missing)}"
            )

        if urlparse(os.environ["DATABASE_URL"]).scheme == "sqlite":
            raise ConfigurationError("SQLite is not allowed in production")


CONFIGS = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def get_config(env=None):
    """
    Resolve and return the correct configuration class
    based on the APP_ENV environment variable.

    Supported values:
    - development
    - testing
    - production
    """

    env = (env or os.getenv("APP_ENV", "development")).lower()

    try:
        config = CONFIGS[env]
    except KeyError:
        raise ConfigurationError(f"Invalid APP_ENV value: {env}")

    if hasattr(config, "validate"):
        config.validate()

    return config
