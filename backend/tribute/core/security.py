"""
Security utilities for password hashing and session cookie signing.
"""
from typing import Optional
import base64
import hashlib
import bcrypt
from jose import JWTError, jwt
from tribute.core.config import settings


def _pre_hash_password(password: str) -> bytes:
    """
    Pre-hash password with SHA256 to support passwords longer than 72 bytes.
    The digest is base64 encoded so bcrypt never sees NUL bytes.
    """
    return base64.b64encode(hashlib.sha256(password.encode('utf-8')).digest())


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash. A malformed hash counts as a mismatch."""
    pre_hashed = _pre_hash_password(plain_password)
    try:
        return bcrypt.checkpw(pre_hashed, hashed_password.encode('utf-8'))
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password with a fresh salt.
    Rounds come from BCRYPT_ROUNDS (10 unless configured otherwise).
    """
    pre_hashed = _pre_hash_password(password)
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(pre_hashed, salt)
    return hashed.decode('utf-8')


def sign_session_id(sid: str) -> str:
    """Wrap a session id in a signed token suitable for the session cookie."""
    return jwt.encode({"sid": sid}, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def unsign_session_id(token: str) -> Optional[str]:
    """Return the session id carried by a cookie value, or None if it was tampered with."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None
