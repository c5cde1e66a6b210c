"""Domain-level request contracts shared by multiple layers."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class CredentialInput:
    """Validated email/password pair supplied for a single auth call."""

    email: str
    password: str = field(repr=False)
