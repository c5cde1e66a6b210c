"""Authentication service owning registration and sign-in rules."""

from __future__ import annotations

import logging

from .account import AccountView
from .contracts import CredentialInput
from .deadline import Deadline
from .errors import AuthError, ConflictError, InvalidCredentialsError, NotFoundError
from .gateway import CredentialStoreGateway
from ..security.passwords import PasswordHasher

logger = logging.getLogger(__name__)


class AuthService:
    """Stateless registration and credential checks over an injected gateway."""

    def __init__(self, gateway: CredentialStoreGateway, hasher: PasswordHasher) -> None:
        """Store the storage gateway and the password hasher."""
        self._gateway = gateway
        self._hasher = hasher

    def register(self, credentials: CredentialInput, *, deadline: Deadline | None = None) -> AccountView:
        """Create an account for an unused email.

        The existence check and the insert are not atomic; a concurrent
        registration that wins the race surfaces from ``insert`` as the same
        :class:`ConflictError` raised by the pre-check.

        Raises
        ------
        ConflictError
            The email is already registered.
        InfrastructureError
            Storage or hashing failed, or the deadline passed.
        """
        op = "AuthService.register"
        try:
            self._gateway.find_by_email(credentials.email, deadline=deadline)
        except NotFoundError:
            pass
        except AuthError as exc:
            exc.annotate(op)
            raise
        else:
            logger.info("registration rejected for %s: email already taken", credentials.email)
            raise ConflictError(op=op)

        try:
            password_hash = self._hasher.hash(credentials.password, deadline=deadline)
            account = self._gateway.insert(credentials.email, password_hash, deadline=deadline)
        except AuthError as exc:
            exc.annotate(op)
            raise

        logger.info("registered account %s", account.account_id)
        return AccountView.from_account(account)

    def authenticate(self, credentials: CredentialInput, *, deadline: Deadline | None = None) -> AccountView:
        """Return the account matching ``credentials``.

        Unknown emails and wrong passwords raise the same
        :class:`InvalidCredentialsError` so responses cannot be used to probe
        which emails are registered.
        """
        op = "AuthService.authenticate"
        try:
            account = self._gateway.find_by_email(credentials.email, deadline=deadline)
        except NotFoundError as exc:
            raise InvalidCredentialsError(op=op) from exc
        except AuthError as exc:
            exc.annotate(op)
            raise

        try:
            matches = self._hasher.verify(credentials.password, account.password_hash, deadline=deadline)
        except AuthError as exc:
            exc.annotate(op)
            raise
        if not matches:
            raise InvalidCredentialsError(op=op)

        logger.info("authenticated account %s", account.account_id)
        return AccountView.from_account(account)
