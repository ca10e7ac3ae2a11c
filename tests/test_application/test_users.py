"""
Tests for registration and password authentication.
"""
import pytest

from app.application.errors import ConflictError, KanbanValidationError
from app.application.users import RegisterUserUseCase
from app.auth import authenticate, hash_password, verify_password


def test_register_normalizes_email(db_session):
    user = RegisterUserUseCase(db_session).execute(email="  Alice@Example.COM ", password="s3cret-pass")
    assert user.email == "alice@example.com"
    assert user.password_hash != "s3cret-pass"


def test_duplicate_email_conflict(db_session):
    RegisterUserUseCase(db_session).execute(email="bob@example.com", password="s3cret-pass")
    with pytest.raises(ConflictError):
        RegisterUserUseCase(db_session).execute(email="BOB@example.com", password="another-pass")


@pytest.mark.parametrize("email,password", [
    ("", "s3cret-pass"),
    ("not-an-email", "s3cret-pass"),
    ("carol@example.com", "short"),
])
def test_invalid_input_rejected(db_session, email, password):
    with pytest.raises(KanbanValidationError):
        RegisterUserUseCase(db_session).execute(email=email, password=password)


def test_authenticate(db_session):
    user = RegisterUserUseCase(db_session).execute(email="dave@example.com", password="s3cret-pass")
    assert authenticate(db_session, "Dave@example.com", "s3cret-pass").id == user.id
    assert authenticate(db_session, "dave@example.com", "wrong-pass") is None
    assert authenticate(db_session, "nobody@example.com", "s3cret-pass") is None


def test_hash_roundtrip():
    h = hash_password("pw-12345")
    assert verify_password("pw-12345", h)
    assert not verify_password("pw-54321", h)
