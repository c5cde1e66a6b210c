from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class Account:
    """Persisted identity record for a registered user."""

    account_id: str
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime


@dataclass(frozen=True, slots=True)
class AccountView:
    """Account projection safe to hand to callers; carries no password material."""

    account_id: str
    email: str

    @classmethod
    def from_account(cls, account: Account) -> AccountView:
        """Build the boundary view from the stored account, dropping the hash."""
        return cls(account_id=account.account_id, email=account.email)
