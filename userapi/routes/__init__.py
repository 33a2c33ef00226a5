"""HTTP routes.

Blueprints for the user CRUD endpoints and the service endpoints
(index and health check).
"""

from .health_routes import bp as health_bp
from .user_routes import bp as users_bp

__all__ = [
    'health_bp',
    'users_bp',
]
