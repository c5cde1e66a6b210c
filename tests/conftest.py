from __future__ import annotations

import uuid
from datetime import datetime, timezone

import pytest

from ticketing_auth.domain.account import Account
from ticketing_auth.domain.deadline import Deadline
from ticketing_auth.domain.errors import ConflictError, InfrastructureError, NotFoundError
from ticketing_auth.security.passwords import PasswordHasher


class FakeGateway:
    """In-memory credential store mimicking the Postgres-backed behaviors."""

    def __init__(self) -> None:
        self.accounts: dict[str, Account] = {}
        self.inserts = 0
        self.lookup_error: Exception | None = None
        self.insert_error: Exception | None = None

    def find_by_email(self, email: str, *, deadline: Deadline | None = None) -> Account:
        if deadline is not None:
            deadline.check("FakeGateway.find_by_email")
        if self.lookup_error is not None:
            raise self.lookup_error
        account = self.accounts.get(email)
        if account is None:
            raise NotFoundError(op="FakeGateway.find_by_email")
        return account

    def insert(self, email: str, password_hash: str, *, deadline: Deadline | None = None) -> Account:
        if deadline is not None:
            deadline.check("FakeGateway.insert")
        if self.insert_error is not None:
            raise self.insert_error
        # Stands in for the UNIQUE constraint on accounts.email.
        if email in self.accounts:
            raise ConflictError(op="FakeGateway.insert")
        account = Account(
            account_id=str(uuid.uuid4()),
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        self.accounts[email] = account
        self.inserts += 1
        return account


def storage_down() -> InfrastructureError:
    return InfrastructureError("connection refused", op="FakeGateway.find_by_email")


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def hasher():
    """bcrypt hasher with the minimum work factor to keep tests fast."""
    instance = PasswordHasher(rounds=4, max_workers=2)
    yield instance
    instance.close()
