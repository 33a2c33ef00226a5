"""Exception types shared across the application layers."""


class UserApiError(Exception):
    """Base class for application errors."""


class ConfigurationError(UserApiError):
    """Raised when the environment does not describe a usable database target."""


class DuplicateEmailError(UserApiError):
    """Raised by the data-access layer when an email collides with an existing row."""

    def __init__(self, email=None):
        self.email = email
        message = "Email already exists"
        if email:
            message = f"Email already exists: {email}"
        super().__init__(message)
