"""Tests for session tokens and password hashing."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from app.core.config import settings
from app.core.security import create_session_token, decode_token, hash_password, verify_password


def test_hash_and_verify_password():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("battery staple", hashed)


def test_verify_password_with_garbage_hash():
    assert not verify_password("anything", "not-an-argon2-hash")


def test_session_token_payload():
    issued = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    token = create_session_token("a@b.com", now=issued)
    payload = jwt.decode(
        token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm], options={"verify_exp": False}
    )
    assert payload["email"] == "a@b.com"
    assert payload["iat"] == int(issued.timestamp())
    assert payload["exp"] == int((issued + timedelta(hours=168)).timestamp())


def test_decode_rejects_expired_token():
    token = create_session_token("a@b.com", now=datetime.now(timezone.utc) - timedelta(hours=168, seconds=5))
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_token(token)


def test_decode_rejects_foreign_signature():
    token = jwt.encode({"email": "a@b.com"}, "some-other-secret-of-sufficient-length!!", algorithm="HS256")
    with pytest.raises(jwt.InvalidSignatureError):
        decode_token(token)
