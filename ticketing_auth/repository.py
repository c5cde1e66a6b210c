"""Postgres-backed credential store for accounts."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

import psycopg
from psycopg import errors
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.account import Account
from .domain.deadline import Deadline
from .domain.errors import ConflictError, InfrastructureError, NotFoundError

logger = logging.getLogger(__name__)


class AccountRepository:
    """Credential store gateway backed by the ``accounts`` table.

    Email uniqueness is ultimately enforced by the table's ``UNIQUE``
    constraint; a violation on insert is reported as :class:`ConflictError`.
    """

    def __init__(self, pool: ConnectionPool, default_timeout: float = 3.0) -> None:
        """Store the connection pool and the timeout used when callers pass no deadline."""
        self._pool = pool
        self._default_timeout = default_timeout

    def find_by_email(self, email: str, *, deadline: Deadline | None = None) -> Account:
        """Fetch the account stored under ``email`` or raise :class:`NotFoundError`."""
        op = "AccountRepository.find_by_email"
        deadline = self._effective_deadline(deadline, op)
        try:
            with self._pool.connection(timeout=deadline.remaining()) as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    self._apply_statement_timeout(cur, deadline)
                    cur.execute(
                        """
                        SELECT account_id, email, password_hash, created_at
                        FROM accounts
                        WHERE email = %s
                        """,
                        (email,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            logger.error("%s failed: %s", op, exc)
            raise InfrastructureError(str(exc), op=op) from exc

        if not row:
            raise NotFoundError(op=op)
        return self._map_record(row)

    def insert(self, email: str, password_hash: str, *, deadline: Deadline | None = None) -> Account:
        """Persist a new account and return it with its generated identifier."""
        op = "AccountRepository.insert"
        deadline = self._effective_deadline(deadline, op)
        account_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc)
        try:
            with self._pool.connection(timeout=deadline.remaining()) as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    self._apply_statement_timeout(cur, deadline)
                    cur.execute(
                        """
                        INSERT INTO accounts (account_id, email, password_hash, created_at)
                        VALUES (%s, %s, %s, %s)
                        RETURNING account_id, email, password_hash, created_at
                        """,
                        (account_id, email, password_hash, now),
                    )
                    record = cur.fetchone()
                conn.commit()
        except errors.UniqueViolation as exc:
            raise ConflictError(op=op) from exc
        except psycopg.Error as exc:
            logger.error("%s failed: %s", op, exc)
            raise InfrastructureError(str(exc), op=op) from exc

        return self._map_record(record)

    def _effective_deadline(self, deadline: Deadline | None, op: str) -> Deadline:
        if deadline is None:
            deadline = Deadline.after(self._default_timeout)
        deadline.check(op)
        return deadline

    def _apply_statement_timeout(self, cur: psycopg.Cursor, deadline: Deadline) -> None:
        """Bound the statement to the time left; the setting is local to the transaction."""
        timeout_ms = max(1, int(deadline.remaining() * 1000))
        cur.execute("SELECT set_config('statement_timeout', %s, true)", (f"{timeout_ms}ms",))

    def _map_record(self, row: tuple) -> Account:
        """Convert a raw database tuple into the domain ``Account`` dataclass."""
        return Account(
            account_id=str(row[0]),
            email=row[1],
            password_hash=row[2],
            created_at=row[3],
        )
