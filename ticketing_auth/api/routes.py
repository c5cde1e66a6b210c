"""HTTP route definitions for the auth service."""

from __future__ import annotations

import logging

import jwt
from fastapi import APIRouter, Cookie, Depends, HTTPException, Request, Response, status
from prometheus_client import Counter
from pydantic import BaseModel, Field, field_validator, validate_email

from ..config import get_settings
from ..domain.account import AccountView
from ..domain.contracts import CredentialInput
from ..domain.deadline import Deadline
from ..domain.errors import AuthError
from ..domain.service import AuthService
from ..security.passwords import MAX_PASSWORD_BYTES
from ..security.tokens import decode_session_token, issue_session_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

AUTH_REQUESTS = Counter(
    "auth_requests_total",
    "Auth requests handled, by operation and outcome.",
    ["operation", "outcome"],
)


class CredentialsRequest(BaseModel):
    """Email/password payload accepted by sign-up and sign-in."""

    email: str
    password: str = Field(..., min_length=8)

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value: str) -> str:
        """Validate like ``EmailStr`` but keep the address exactly as submitted."""
        _, normalized = validate_email(value)
        # Reject display-name forms such as "Bob <bob@example.com>".
        if normalized.lower() != value.lower():
            raise ValueError("value is not a valid email address")
        return value

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value

    def to_domain(self) -> CredentialInput:
        return CredentialInput(email=self.email, password=self.password)


class AccountResponse(BaseModel):
    """Serialised representation of an `AccountView`."""

    id: str
    email: str

    @classmethod
    def from_domain(cls, account: AccountView) -> "AccountResponse":
        """Build a response model from the domain view."""
        return cls(id=account.account_id, email=account.email)


class MessageResponse(BaseModel):
    detail: str


settings = get_settings()


def get_service(request: Request) -> AuthService:
    """Resolve the `AuthService` stored on the FastAPI application state."""
    service: AuthService = request.app.state.auth_service
    return service


def request_deadline() -> Deadline:
    """Per-request deadline shared by storage and hashing."""
    return Deadline.after(settings.request_timeout_seconds)


def _set_session_cookie(response: Response, account: AccountView) -> None:
    token, expires_in = issue_session_token(account)
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=expires_in,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post("/signup", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def sign_up(
    payload: CredentialsRequest,
    response: Response,
    service: AuthService = Depends(get_service),
    deadline: Deadline = Depends(request_deadline),
) -> AccountResponse:
    """Register a new account and start a session for it."""
    try:
        account = service.register(payload.to_domain(), deadline=deadline)
    except AuthError as exc:
        AUTH_REQUESTS.labels("signup", exc.kind.value).inc()
        raise
    AUTH_REQUESTS.labels("signup", "success").inc()
    _set_session_cookie(response, account)
    return AccountResponse.from_domain(account)


@router.post("", response_model=AccountResponse)
def sign_in(
    payload: CredentialsRequest,
    response: Response,
    service: AuthService = Depends(get_service),
    deadline: Deadline = Depends(request_deadline),
) -> AccountResponse:
    """Verify credentials and issue a fresh session."""
    try:
        account = service.authenticate(payload.to_domain(), deadline=deadline)
    except AuthError as exc:
        AUTH_REQUESTS.labels("signin", exc.kind.value).inc()
        raise
    AUTH_REQUESTS.labels("signin", "success").inc()
    _set_session_cookie(response, account)
    return AccountResponse.from_domain(account)


@router.get("", response_model=AccountResponse)
def current_user(session: str | None = Cookie(default=None)) -> AccountResponse:
    """Return the account carried by the session cookie."""
    if not session:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing session")
    try:
        claims = decode_session_token(session)
    except jwt.PyJWTError as exc:
        logger.info("rejected session token: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid session") from exc
    return AccountResponse(id=claims["sub"], email=claims["email"])


@router.post("/signout", response_model=MessageResponse)
def sign_out(response: Response, session: str | None = Cookie(default=None)) -> MessageResponse:
    """Expire the session cookie."""
    if not session:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="missing session cookie")
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return MessageResponse(detail="Logged out")
