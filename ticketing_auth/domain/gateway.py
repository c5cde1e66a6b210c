"""Storage contract the authentication service depends on."""

from __future__ import annotations

from typing import Protocol

from .account import Account
from .deadline import Deadline


class CredentialStoreGateway(Protocol):
    """Lookup and insert of accounts against durable storage.

    Implementations perform exactly one read or one write per call and must
    give up once ``deadline`` passes.
    """

    def find_by_email(self, email: str, *, deadline: Deadline | None = None) -> Account:
        """Return the account stored under ``email`` (compared verbatim).

        Raises
        ------
        NotFoundError
            When no account matches.
        InfrastructureError
            For any other storage failure, including timeouts.
        """
        ...

    def insert(self, email: str, password_hash: str, *, deadline: Deadline | None = None) -> Account:
        """Persist a new account and return it with its generated identifier.

        Raises
        ------
        ConflictError
            When the storage uniqueness constraint on ``email`` rejects the row.
        InfrastructureError
            For any other storage failure, including timeouts.
        """
        ...
