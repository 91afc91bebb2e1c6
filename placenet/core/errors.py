"""
Error taxonomy shared by services, routes and the API client.

Services raise these; the handlers registered in main.py turn them into
JSON responses of the form {"detail": "..."} with the matching status.
"""

from typing import Optional


class PlacenetError(Exception):
    """Base class for every domain error."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(PlacenetError):
    status_code = 404
    default_message = "Resource not found"


class Unauthorized(PlacenetError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(PlacenetError):
    status_code = 403
    default_message = "Forbidden"


class ValidationError(PlacenetError):
    status_code = 422
    default_message = "Invalid request"


class BadRequest(ValidationError):
    """Well-formed request the current state cannot accept (e.g. applying to a closed job)."""

    status_code = 400
    default_message = "Bad request"


class InvalidTransition(ValidationError):
    """Requested status change is not an edge of the pipeline."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move application from '{current}' to '{requested}'")


class Conflict(PlacenetError):
    status_code = 409
    default_message = "Resource was modified by someone else"


class TransportError(PlacenetError):
    """Network or WebSocket failure seen by the client. Never fatal to the server."""

    status_code = 503
    default_message = "Network request failed"


_BY_STATUS = {
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
    409: Conflict,
    400: BadRequest,
    422: ValidationError,
}


def error_for_status(status_code: int, message: Optional[str] = None) -> PlacenetError:
    """Map an HTTP status back onto the taxonomy (used by the API client)."""
    cls = _BY_STATUS.get(status_code, PlacenetError)
    err = cls(message)
    if cls is PlacenetError:
        err.status_code = status_code
    return err
