"""
Configuration classes for the taskboard frontend.

The frontend is stateless with respect to tasks: it serves server-rendered
HTML and delegates all persistence to the remote Task API over HTTP.
Configuration values are loaded from environment variables with sensible
defaults.
"""

from __future__ import annotations

import os


class Config:
    """Base configuration for all frontend environments."""

    SECRET_KEY: str = os.environ.get(
        "SECRET_KEY", "taskboard-dev-secret-change-in-production"
    )

    TASK_API_URL: str = os.environ.get("TASK_API_URL", "http://localhost:3000/tasks")
    TASK_API_TIMEOUT: int = int(os.environ.get("TASK_API_TIMEOUT", "5"))
    # The Task API removes records through an update-style verb.
    TASK_API_DELETE_METHOD: str = os.environ.get("TASK_API_DELETE_METHOD", "PUT").upper()

    SESSION_COOKIE_HTTPONLY: bool = True
    SESSION_COOKIE_SAMESITE: str = os.environ.get("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_COOKIE_SECURE: bool = (
        os.environ.get("SESSION_COOKIE_SECURE", "false").strip().lower() == "true"
    )


class DevelopmentConfig(Config):
    """Configuration for local development."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """Configuration for automated tests."""

    DEBUG: bool = True
    TESTING: bool = True

    TASK_API_URL: str = os.environ.get("TEST_TASK_API_URL", "http://task-api/tasks")
    TASK_API_TIMEOUT: int = int(os.environ.get("TEST_TASK_API_TIMEOUT", "1"))


class ProductionConfig(Config):
    """Configuration for production deployments."""

    DEBUG: bool = False
    TESTING: bool = False
    SESSION_COOKIE_SECURE: bool = (
        os.environ.get("SESSION_COOKIE_SECURE", "true").strip().lower() == "true"
    )


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Look up and return the configuration class for the given environment.

    Args:
        env: Environment name. When None, falls back to FLASK_ENV.

    Returns:
        The selected configuration class.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
