"""
Domain errors raised by the social managers.

Each carries the HTTP status the API maps it to; src/app.py registers one
handler for SocialError so routes never translate these by hand.
"""


class SocialError(Exception):
    """Base class for terminal failures of a single social operation."""
    status_code = 400
    code = "social_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(SocialError):
    """No resolvable identity for an operation that requires one."""
    status_code = 401
    code = "unauthenticated"


class NotFound(SocialError):
    """Referenced profile, post, comment or user is absent."""
    status_code = 404
    code = "not_found"


class AlreadyExists(SocialError):
    """Duplicate creation, e.g. a second profile for the same user."""
    status_code = 409
    code = "already_exists"


class InvalidArgument(SocialError):
    """Self-follow or otherwise malformed input."""
    status_code = 400
    code = "invalid_argument"
