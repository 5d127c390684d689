"""
Taskboard Flask application factory.

Provides the ``create_app`` factory that assembles the task-management
frontend. The app serves one server-rendered page (form + task list) and
delegates all persistence to the remote Task API; it never touches a
database directly.

Key Concepts Demonstrated:
- Application factory pattern (``create_app``)
- Backend-for-Frontend (BFF) architecture
- Blueprint-based route registration
- Lazy import to avoid circular dependencies
"""

from __future__ import annotations

import logging

from flask import Flask

from .config import get_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the taskboard application.

    Args:
        config_name: Optional configuration environment name
            (``"development"``, ``"testing"``, ``"production"``). When
            *None*, the value is read from the ``FLASK_ENV`` environment
            variable, defaulting to ``"development"``.

    Returns:
        A configured :class:`~flask.Flask` application instance.
    """
    app = Flask(__name__, instance_relative_config=True)
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    logger.info("Creating taskboard app with config: %s", config_class.__name__)
    logger.info("Task API at %s", app.config["TASK_API_URL"])

    # Import inside the factory to avoid circular imports.
    from .routes.views import views_bp

    app.register_blueprint(views_bp)
    return app
