from __future__ import annotations

from ticketing_auth.api.errors import ERROR_KIND_TO_STATUS
from ticketing_auth.domain.errors import (
    INTERNAL_ERROR_MESSAGE,
    AuthError,
    ConflictError,
    ErrorKind,
    InfrastructureError,
    InvalidCredentialsError,
    NotFoundError,
)


def test_every_error_class_has_a_distinct_kind():
    classes = [NotFoundError, ConflictError, InvalidCredentialsError, InfrastructureError]

    assert {cls.kind for cls in classes} == set(ErrorKind)
    assert all(issubclass(cls, AuthError) for cls in classes)


def test_every_kind_maps_to_a_status():
    assert ERROR_KIND_TO_STATUS == {
        ErrorKind.NOT_FOUND: 400,
        ErrorKind.CONFLICT: 409,
        ErrorKind.INVALID_CREDENTIALS: 400,
        ErrorKind.INFRASTRUCTURE: 500,
    }


def test_annotate_builds_operation_trail_without_changing_kind():
    error = InfrastructureError("timeout", op="AccountRepository.find_by_email")

    annotated = error.annotate("AuthService.register")

    assert annotated is error
    assert annotated.kind is ErrorKind.INFRASTRUCTURE
    assert str(annotated) == "AuthService.register: AccountRepository.find_by_email: timeout"


def test_infrastructure_detail_is_not_public():
    error = InfrastructureError("password authentication failed for user postgres")

    assert error.public_message == INTERNAL_ERROR_MESSAGE
    assert error.message.startswith("password authentication failed")


def test_domain_errors_default_to_user_facing_messages():
    assert ConflictError().public_message == "Email already taken"
    assert InvalidCredentialsError().public_message == "Invalid email or password"
    assert str(NotFoundError()) == "Account not found"
