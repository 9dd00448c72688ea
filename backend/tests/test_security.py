# 보안 유닛 테스트 (DB 의존성 없음)
from datetime import timedelta

import jwt
import pytest

from placeshare.core.config import settings
from placeshare.core.exceptions import AppError, ErrorKind
from placeshare.core.security import (
    create_access_token,
    create_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


def test_password_hash_and_verify():
    pw = "S3cure!pw"
    hashed = get_password_hash(pw)
    assert hashed != pw
    assert verify_password(pw, hashed)
    assert not verify_password("wrong", hashed)


def test_password_hash_is_salted():
    first = get_password_hash("same-password")
    second = get_password_hash("same-password")
    assert first != second
    assert verify_password("same-password", first)
    assert verify_password("same-password", second)


def test_create_access_token():
    token = create_access_token("user123", "alice@example.com")
    decoded = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    assert decoded["userId"] == "user123"
    assert decoded["email"] == "alice@example.com"
    assert decoded["type"] == "access"
    assert decoded["exp"] > decoded["iat"]


def test_decode_access_token_roundtrip():
    token = create_access_token("user123", "alice@example.com")
    assert decode_access_token(token) == {"userId": "user123", "email": "alice@example.com"}


def test_decode_rejects_expired_token():
    token = create_token({"userId": "user123", "email": "a@b.co", "type": "access"}, timedelta(seconds=-5))
    with pytest.raises(AppError) as exc_info:
        decode_access_token(token)
    assert exc_info.value.kind == ErrorKind.INVALID_TOKEN
    assert "expired" in exc_info.value.message


def test_decode_rejects_bad_signature():
    token = jwt.encode({"userId": "user123", "type": "access"}, "another-secret", algorithm="HS256")
    with pytest.raises(AppError) as exc_info:
        decode_access_token(token)
    assert exc_info.value.kind == ErrorKind.INVALID_TOKEN


@pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
def test_decode_rejects_malformed_token(token):
    with pytest.raises(AppError) as exc_info:
        decode_access_token(token)
    assert exc_info.value.kind == ErrorKind.INVALID_TOKEN


def test_decode_rejects_token_without_user_id():
    token = create_token({"email": "a@b.co", "type": "access"}, timedelta(minutes=5))
    with pytest.raises(AppError) as exc_info:
        decode_access_token(token)
    assert exc_info.value.kind == ErrorKind.INVALID_TOKEN
