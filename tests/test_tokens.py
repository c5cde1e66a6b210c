from __future__ import annotations

import jwt
import pytest

from ticketing_auth.config import get_settings
from ticketing_auth.domain.account import AccountView
from ticketing_auth.security.tokens import decode_session_token, issue_session_token


def test_session_token_round_trips_account_identity():
    account = AccountView(account_id="acc-1", email="a@x.com")

    token, expires_in = issue_session_token(account)
    claims = decode_session_token(token)

    assert expires_in == get_settings().session_ttl_seconds
    assert claims["sub"] == "acc-1"
    assert claims["email"] == "a@x.com"
    assert claims["iss"] == get_settings().jwt_issuer
    assert "password" not in claims


def test_session_token_signed_with_other_key_is_rejected():
    forged = jwt.encode(
        {"sub": "acc-1", "email": "a@x.com", "iss": get_settings().jwt_issuer, "exp": 9999999999},
        "some-other-secret",
        algorithm="HS256",
    )

    with pytest.raises(jwt.PyJWTError):
        decode_session_token(forged)


def test_expired_session_token_is_rejected():
    settings = get_settings()
    expired = jwt.encode(
        {"sub": "acc-1", "email": "a@x.com", "iss": settings.jwt_issuer, "exp": 1},
        settings.jwt_secret,
        algorithm="HS256",
    )

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_session_token(expired)
