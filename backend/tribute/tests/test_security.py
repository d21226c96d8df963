"""
Tests for password hashing and session cookie signing.
"""
from tribute.core.security import (
    get_password_hash, verify_password, sign_session_id, unsign_session_id
)


def test_hash_is_salted_and_not_plaintext():
    first = get_password_hash("password123")
    second = get_password_hash("password123")

    assert first != "password123"
    assert first != second
    assert first.startswith("$2")


def test_verify_password():
    hashed = get_password_hash("password123")

    assert verify_password("password123", hashed) is True
    assert verify_password("password124", hashed) is False


def test_verify_password_with_malformed_hash_returns_false():
    assert verify_password("password123", "not-a-bcrypt-hash") is False


def test_long_passwords_are_not_truncated():
    base = "x" * 80
    hashed = get_password_hash(base + "a")

    assert verify_password(base + "a", hashed) is True
    assert verify_password(base + "b", hashed) is False


def test_session_id_signing():
    token = sign_session_id("abc123")

    assert token != "abc123"
    assert unsign_session_id(token) == "abc123"


def test_tampered_session_token_is_rejected():
    token = sign_session_id("abc123")
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])

    assert unsign_session_id(tampered) is None
    assert unsign_session_id("garbage") is None
