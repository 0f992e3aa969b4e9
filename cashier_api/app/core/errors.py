"""
Domain errors raised by the service layer.

Services never build HTTP responses themselves.  They raise one of the
exceptions below and ``main.create_app`` registers handlers that turn
them into JSON responses with the matching status code.  Anything not
derived from ``CashierError`` is treated as an internal failure.
"""

from typing import Optional


class CashierError(Exception):
    """Base class for expected, client‑visible failures."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CashierError):
    """Request payload is missing a required field or has a bad value."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class NotFoundError(CashierError):
    """A product (or other keyed entry) does not exist."""

    status_code = 404


class ConflictError(CashierError):
    """A key is already taken (duplicate product name, transaction id)."""

    status_code = 409


class ConcurrentModificationError(CashierError):
    """A dataset changed between read and replace."""

    status_code = 409
