"""WSGI entry point for the taskboard frontend."""

import os

from taskboard import create_app

app = create_app(os.getenv("FLASK_ENV", "production"))
