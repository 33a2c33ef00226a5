"""Index and health check endpoints."""

import logging

from flask import Blueprint, current_app, jsonify

from userapi.models import isoformat, utcnow

from .decorators import log_api_request

bp = Blueprint("health", __name__)
logger = logging.getLogger(__name__)


@bp.route("/")
def index():
    """Describe the available endpoints."""
    return jsonify({
        "message": "User API",
        "endpoints": {
            "users": "/users",
            "health": "/health",
        }
    })


@bp.route("/health")
@log_api_request()
def health():
    """Health check endpoint."""
    try:
        connected = current_app.extensions["database"].ping()
        return jsonify({
            "status": "ok",
            "database": "connected" if connected else "disconnected",
            "environment": current_app.config["ENVIRONMENT"],
            "timestamp": isoformat(utcnow()),
        })
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return jsonify({
            "status": "error",
            "database": "error",
            "error": str(e)
        }), 500
