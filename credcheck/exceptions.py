"""Exceptions raised by services and rendered by the API error handlers."""


class CredCheckError(Exception):
    """Base exception for errors that map to an HTTP response."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(CredCheckError):
    """Missing or malformed input."""

    status_code = 400


class AuthError(CredCheckError):
    """Missing/invalid token (401) or wrong role/ownership (403)."""

    status_code = 401


class NotFoundError(CredCheckError):
    """No row matches the requested id."""

    status_code = 404


class StateError(CredCheckError):
    """Requested status change is not a legal transition."""

    status_code = 409


class GoneError(CredCheckError):
    """Resource existed but is no longer available."""

    status_code = 410


class StoreError(CredCheckError):
    """Underlying database statement failed."""

    status_code = 500

    def __init__(self, message: str = 'Database error'):
        super().__init__(message)
