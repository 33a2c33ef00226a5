"""JSON error responses for the whole application."""

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


def error_response(message: str, status: int):
    """Build the ``{"error": message}`` body every failure uses."""
    return jsonify({"error": message}), status


def register_error_handlers(app: Flask) -> None:
    """Map unmatched routes and uncaught exceptions to JSON bodies."""

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        if err.code == 404:
            return error_response("Endpoint not found", 404)
        if err.code == 405:
            return error_response("Method not allowed", 405)
        return error_response(err.description or err.name, err.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected_exception(err: Exception):
        logger.exception(f"Unhandled error: {err}")
        return error_response("Internal server error", 500)
