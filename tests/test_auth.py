from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from jose import jwt

from projecthub import auth, crud, schemas
from projecthub.exceptions import (
    EmailAlreadyInUse,
    InvalidCredentials,
    PasswordsDoNotMatch,
    UserNotFound,
)


def signup_payload(**overrides):
    data = {
        "email": "ada@example.com",
        "password": "password123",
        "confirm_password": "password123",
        "first_name": "Ada",
        "last_name": "Lovelace",
    }
    data.update(overrides)
    return schemas.UserCreate(**data)


def test_sign_up_hashes_password_and_issues_token(db):
    user, token = auth.sign_up(db, signup_payload())

    assert user.hashed_password != "password123"
    assert auth.verify_password("password123", user.hashed_password)
    assert auth.decode_access_token(token) == user.id


def test_sign_up_password_mismatch(db):
    with pytest.raises(PasswordsDoNotMatch):
        auth.sign_up(db, signup_payload(confirm_password="different123"))
    assert crud.get_user_by_email(db, "ada@example.com") is None


def test_sign_up_duplicate_email(db):
    auth.sign_up(db, signup_payload())
    with pytest.raises(EmailAlreadyInUse):
        auth.sign_up(db, signup_payload())


def test_sign_in(db, make_user):
    user = make_user(email="ada@example.com", password="password123")
    signed_in, token = auth.sign_in(db, schemas.UserLogin(email="ada@example.com", password="password123"))
    assert signed_in.id == user.id
    assert auth.decode_access_token(token) == user.id


def test_sign_in_failures_are_indistinguishable(db, make_user):
    make_user(email="ada@example.com", password="password123")

    with pytest.raises(InvalidCredentials) as wrong_password:
        auth.sign_in(db, schemas.UserLogin(email="ada@example.com", password="nope-nope"))
    with pytest.raises(InvalidCredentials) as unknown_email:
        auth.sign_in(db, schemas.UserLogin(email="ghost@example.com", password="password123"))

    assert type(wrong_password.value) is type(unknown_email.value)
    assert wrong_password.value.status_code == unknown_email.value.status_code == 401
    assert wrong_password.value.detail == unknown_email.value.detail


def test_update_password(db, make_user):
    user = make_user(password="password123")
    auth.update_password(db, user.id, schemas.PasswordUpdate(current_password="password123", new_password="newpassword1"))
    assert auth.verify_password("newpassword1", crud.get_user(db, user.id).hashed_password)


def test_update_password_wrong_current(db, make_user):
    user = make_user(password="password123")
    with pytest.raises(InvalidCredentials):
        auth.update_password(db, user.id, schemas.PasswordUpdate(current_password="wrongpass1", new_password="newpassword1"))


def test_update_password_unknown_user(db):
    with pytest.raises(UserNotFound):
        auth.update_password(db, 999, schemas.PasswordUpdate(current_password="password123", new_password="newpassword1"))


def test_expired_token_rejected():
    token = auth.create_access_token(1, expires_delta=timedelta(seconds=-1))
    with pytest.raises(HTTPException) as exc:
        auth.decode_access_token(token)
    assert exc.value.status_code == 401


def test_tampered_token_rejected():
    token = auth.create_access_token(1)
    with pytest.raises(HTTPException):
        auth.decode_access_token(token + "x")


def test_token_carries_user_id_and_lasts_a_day():
    before = datetime.now(timezone.utc)
    claims = jwt.get_unverified_claims(auth.create_access_token(42))

    assert claims["sub"] == "42"
    expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    assert abs(expires - (before + timedelta(hours=24))) < timedelta(minutes=1)


def test_verify_password_uses_configured_hasher():
    hashed = auth.hash_password("password123")
    assert hashed.startswith("$2b$04$")
    assert auth.verify_password("password123", hashed)
    assert not auth.verify_password("password124", hashed)
