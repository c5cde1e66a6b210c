from __future__ import annotations

import time
from dataclasses import dataclass

from .errors import InfrastructureError


@dataclass(frozen=True, slots=True)
class Deadline:
    """Absolute point in time (monotonic clock) after which work is abandoned."""

    expires_at: float

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        """Return a deadline ``seconds`` from now."""
        return cls(expires_at=time.monotonic() + seconds)

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""
        return max(0.0, self.expires_at - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def check(self, op: str) -> None:
        """Raise :class:`InfrastructureError` when the deadline has passed."""
        if self.expired:
            raise InfrastructureError("deadline exceeded", op=op)
