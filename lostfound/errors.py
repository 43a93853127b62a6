"""Error taxonomy shared by the gateway, the services and the HTTP layer.

Every error carries the HTTP status the API answers with, so routers can let
them propagate to the single exception handler registered in ``main``.
"""


class LostFoundError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RemoteError(LostFoundError):
    """A read or write against the data store or file storage failed."""

    status_code = 502


class AuthError(LostFoundError):
    """Sign-in, sign-up or sign-out failed."""

    status_code = 401


class ValidationError(LostFoundError):
    """Client supplied data the workflow refuses (empty content, bad file, ...)."""

    status_code = 422


class PermissionDeniedError(LostFoundError):
    status_code = 403


class NotFoundError(LostFoundError):
    status_code = 404


class ConflictError(LostFoundError):
    """The requested transition clashes with the current state of a row."""

    status_code = 409
