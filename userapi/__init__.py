import logging
from typing import Any, Mapping, Optional

from flask import Flask, g

from .config import settings
from .database import Database, open_database
from .errors import register_error_handlers

logger = logging.getLogger(__name__)


def create_app(database: Optional[Database] = None,
               test_config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Build the Flask application around one storage handle.

    Args:
        database: Initialized storage handle; resolved from the environment
            and initialized here when omitted
        test_config: Extra Flask config values
    """
    app = Flask(__name__)

    app.config.from_mapping(
        DEBUG=settings.DEBUG,
        ENVIRONMENT=settings.NODE_ENV,
    )
    app.json.sort_keys = False

    if test_config:
        app.config.update(test_config)

    if database is None:
        database = open_database(settings.NODE_ENV, echo=settings.SQL_ECHO)

    # attach to app for the route handlers to use
    app.extensions["database"] = database

    @app.teardown_appcontext
    def close_session(exc):
        session = g.pop("db_session", None)
        if session is not None:
            session.close()

    from .routes import health_bp, users_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(users_bp)

    register_error_handlers(app)

    return app
