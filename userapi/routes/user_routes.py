"""User CRUD endpoints."""

import logging
from typing import Optional

from flask import Blueprint, current_app, g, jsonify, request

from userapi.errors import error_response
from userapi.repositories import UserRepository
from userapi.services import ErrorKind, UserService
from userapi.validation import validate_user_payload

from .decorators import log_api_request, security_headers

bp = Blueprint("users", __name__, url_prefix="/users")
logger = logging.getLogger(__name__)

# users.id is a 32-bit INTEGER column
MAX_USER_ID = 2**31 - 1

# Failure kind -> (status, message); database errors use the per-route message
FAILURE_RESPONSES = {
    ErrorKind.NOT_FOUND: (404, "User not found"),
    ErrorKind.EMAIL_EXISTS: (400, "Email already exists"),
}


def get_user_service() -> UserService:
    """Service bound to this request's session."""
    if "db_session" not in g:
        g.db_session = current_app.extensions["database"].session_factory()
    return UserService(UserRepository(g.db_session))


def parse_user_id(raw: str) -> Optional[int]:
    """Return the id for a base-10 integer string in 1..MAX_USER_ID, else None."""
    if not raw.isascii() or not raw.isdigit():
        return None
    user_id = int(raw)
    return user_id if 0 < user_id <= MAX_USER_ID else None


def failure(result, database_message: str):
    status, message = FAILURE_RESPONSES.get(result.error, (500, database_message))
    return error_response(message, status)


@bp.route("", methods=["GET"])
@security_headers()
@log_api_request()
def list_users():
    """List all users, newest first."""
    result = get_user_service().get_all_users()
    if not result.success:
        return failure(result, "Failed to fetch users")
    return jsonify([user.to_dict() for user in result.data])


@bp.route("/<user_id>", methods=["GET"])
@security_headers()
@log_api_request()
def get_user(user_id):
    """Get one user by id."""
    parsed_id = parse_user_id(user_id)
    if parsed_id is None:
        return error_response("Invalid user ID", 400)

    result = get_user_service().get_user_by_id(parsed_id)
    if not result.success:
        return failure(result, "Failed to fetch user")
    return jsonify(result.data.to_dict())


@bp.route("", methods=["POST"])
@security_headers()
@log_api_request()
def create_user():
    """Create a user from a JSON body."""
    outcome = validate_user_payload(request.get_json(silent=True))
    if not outcome.is_valid:
        logger.info(f"Rejected user payload: {outcome.errors}")
        return error_response(outcome.first_error, 400)

    result = get_user_service().create_user(outcome.data)
    if not result.success:
        return failure(result, "Failed to create user")
    return jsonify(result.data.to_dict()), 201


@bp.route("/<user_id>", methods=["PUT"])
@security_headers()
@log_api_request()
def update_user(user_id):
    """Update the fields present in the JSON body."""
    parsed_id = parse_user_id(user_id)
    if parsed_id is None:
        return error_response("Invalid user ID", 400)

    outcome = validate_user_payload(request.get_json(silent=True), partial=True)
    if not outcome.is_valid:
        logger.info(f"Rejected update for user {parsed_id}: {outcome.errors}")
        return error_response(outcome.first_error, 400)

    result = get_user_service().update_user(parsed_id, outcome.data)
    if not result.success:
        return failure(result, "Failed to update user")
    return jsonify(result.data.to_dict())


@bp.route("/<user_id>", methods=["DELETE"])
@security_headers()
@log_api_request()
def delete_user(user_id):
    """Hard-delete a user."""
    parsed_id = parse_user_id(user_id)
    if parsed_id is None:
        return error_response("Invalid user ID", 400)

    result = get_user_service().delete_user(parsed_id)
    if not result.success:
        return failure(result, "Failed to delete user")
    return "", 204
