"""Error taxonomy shared by the stores, the logic layer and the routers.

Every error ends the request it was raised in. The HTTP layer renders
them as ``{"error": message}`` with the status code of its class.
"""


class FilesManagerError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(FilesManagerError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid input"


class AuthenticationError(FilesManagerError):
    """Missing, invalid or expired credential or token."""

    status_code = 401
    default_message = "Unauthorized"


class AuthorizationError(FilesManagerError):
    """Authenticated, but not allowed to touch the resource."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(FilesManagerError):
    """Resource is absent, or hidden from the requester."""

    status_code = 404
    default_message = "Not found"


class DependencyError(FilesManagerError):
    """A backing store could not be reached."""

    status_code = 503
    default_message = "Service unavailable"
