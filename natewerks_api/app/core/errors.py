"""
Exception hierarchy shared by the store, the services and the API layer.

Services raise these exceptions; ``main.create_app`` registers handlers
that translate them into JSON responses.  ``status_code`` and ``body_key``
describe that translation so each handler stays a one‑liner.
"""


class ServiceError(Exception):
    """Base class for failures surfaced to API clients."""

    status_code = 500
    # Client errors are reported under ``message``, failures under ``error``.
    body_key = "error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NotFound(ServiceError):
    status_code = 404
    body_key = "message"


class UserNotFound(NotFound):
    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)


class Unauthorized(ServiceError):
    """The principal is missing or lacks the required role."""

    status_code = 403
    body_key = "message"

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class InvalidCredentials(ServiceError):
    status_code = 400
    body_key = "message"

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class StoreError(ServiceError):
    """The record store could not complete an operation."""


class BillingError(ServiceError):
    """The payment processor rejected or failed a request."""
