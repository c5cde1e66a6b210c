"""Password hashing using bcrypt.

Hashing and verification are deliberately slow, so both run on a small worker
pool; callers wait at most until their deadline and get an
:class:`InfrastructureError` if the pool cannot keep up.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Callable, TypeVar

import bcrypt

from ..domain.deadline import Deadline
from ..domain.errors import InfrastructureError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# bcrypt only consumes the first 72 bytes of its input and rejects longer ones.
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted bcrypt hashing with a configurable work factor.

    Examples
    --------
    >>> hasher = PasswordHasher(rounds=4)
    >>> hashed = hasher.hash("my_secure_password")
    >>> hasher.verify("my_secure_password", hashed)
    True
    >>> hasher.verify("wrong_password", hashed)
    False
    """

    def __init__(self, rounds: int = 12, max_workers: int = 4) -> None:
        """Initialise the hasher.

        Parameters
        ----------
        rounds
            The bcrypt work factor (log2 of iterations). 12 keeps offline
            brute force expensive while staying well under a request budget.
        max_workers
            Number of threads that may hash concurrently.
        """
        self._rounds = rounds
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="bcrypt")

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str, *, deadline: Deadline | None = None) -> str:
        """Return the bcrypt hash of ``password``.

        Raises
        ------
        InfrastructureError
            If the password exceeds bcrypt's input limit, hashing fails, or
            the deadline passes first.
        """
        op = "PasswordHasher.hash"
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise InfrastructureError(
                f"password exceeds {MAX_PASSWORD_BYTES} bytes", op=op
            )
        hashed = self._run(op, lambda: bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=self._rounds)), deadline)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str, *, deadline: Deadline | None = None) -> bool:
        """Check ``password`` against ``password_hash`` in constant time.

        Returns ``False`` on mismatch. A stored hash bcrypt cannot parse is a
        data problem rather than a wrong password and raises
        :class:`InfrastructureError`.
        """
        op = "PasswordHasher.verify"
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            # Nothing that long was ever hashed, so it cannot match.
            return False
        return self._run(op, lambda: bcrypt.checkpw(encoded, password_hash.encode("utf-8")), deadline)

    def close(self) -> None:
        """Stop accepting work and wait for in-flight hashes to finish."""
        self._executor.shutdown(wait=True)

    def _run(self, op: str, fn: Callable[[], T], deadline: Deadline | None) -> T:
        if deadline is not None:
            deadline.check(op)
        future: Future[T] = self._executor.submit(fn)
        try:
            return future.result(timeout=deadline.remaining() if deadline is not None else None)
        except FutureTimeoutError as exc:
            # Only dequeues work that has not started; a running hash finishes in its worker.
            future.cancel()
            logger.warning("%s abandoned after deadline", op)
            raise InfrastructureError("deadline exceeded", op=op) from exc
        except (ValueError, TypeError) as exc:
            raise InfrastructureError(f"bcrypt failure: {exc}", op=op) from exc
