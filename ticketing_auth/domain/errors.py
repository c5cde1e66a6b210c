"""Error taxonomy shared by the gateway, the service and the HTTP layer.

Every error carries an explicit :class:`ErrorKind`. Callers branch on the kind
(or the concrete class), never on the message text. Errors collect the names of
the operations they pass through so logs show where a failure originated, while
``public_message`` stays safe to return to end users.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

EMAIL_TAKEN_MESSAGE = "Email already taken"
INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class ErrorKind(str, Enum):
    """Stable error kinds understood by callers of the auth service."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_CREDENTIALS = "invalid_credentials"
    INFRASTRUCTURE = "infrastructure"


class AuthError(Exception):
    """Base class for every error raised by the auth domain."""

    kind: ClassVar[ErrorKind]
    default_message: ClassVar[str] = "Authentication error"

    def __init__(self, message: str | None = None, *, op: str | None = None) -> None:
        self.message = message or self.default_message
        self.ops: list[str] = [op] if op else []
        super().__init__(self.message)

    def annotate(self, op: str) -> AuthError:
        """Record that the error propagated through ``op`` and return it."""
        self.ops.append(op)
        return self

    @property
    def public_message(self) -> str:
        return self.message

    def __str__(self) -> str:
        if not self.ops:
            return self.message
        return f"{': '.join(reversed(self.ops))}: {self.message}"


class NotFoundError(AuthError):
    """No account matches the requested email."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Account not found"


class ConflictError(AuthError):
    """The email is already registered."""

    kind = ErrorKind.CONFLICT
    default_message = EMAIL_TAKEN_MESSAGE


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password; deliberately indistinguishable."""

    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = INVALID_CREDENTIALS_MESSAGE


class InfrastructureError(AuthError):
    """Storage, hashing or deadline failure.

    ``message`` holds operational detail for logs; users only ever see
    :data:`INTERNAL_ERROR_MESSAGE`.
    """

    kind = ErrorKind.INFRASTRUCTURE
    default_message = "Infrastructure failure"

    @property
    def public_message(self) -> str:
        return INTERNAL_ERROR_MESSAGE
