"""
Security: password hashing and signed session tokens.
Challenge: Secure auth, no plain-text passwords, tamper-evident tokens that can still be revoked.
Design: Token = JWT carrying user id + session id; revocation lives in the store, not here.
"""

import hashlib
import secrets
from datetime import datetime, timezone, timedelta
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from todo_api.config import get_settings
from todo_api.core.exceptions import HashingError, TokenInvalidError

settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)

SESSION_CLAIM = "sid"
# Largest id a BIGINT primary key can hold
USER_ID_MAX = 2**63 - 1


def hash_password(password: str) -> str:
    """One-way salted hash for storage. Never store plain passwords."""
    try:
        return pwd_context.hash(password)
    except (ValueError, TypeError) as exc:
        raise HashingError(f"password hashing failed: {exc}") from exc


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time comparison for login. A corrupt stored hash never verifies."""
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False


def new_session_id() -> str:
    """Unguessable session identifier (256 bits of entropy)."""
    return secrets.token_urlsafe(32)


def hash_session_id(session_id: str) -> str:
    """Digest stored in place of the raw session id, so a DB dump yields no live sessions."""
    return hashlib.sha256(session_id.encode("utf-8")).hexdigest()


def encode_session_token(user_id: int, session_id: str) -> str:
    """Sign a token binding the user to one session, valid until the configured expiry."""
    now = datetime.now(timezone.utc)
    to_encode: dict[str, Any] = {
        "sub": str(user_id),
        SESSION_CLAIM: session_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.session_expire_minutes),
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> tuple[int, str]:
    """
    Verify signature and expiry and return (user_id, session_id).
    Stateless: no store lookup happens here.
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise TokenInvalidError() from exc

    subject = payload.get("sub")
    session_id = payload.get(SESSION_CLAIM)
    if not isinstance(subject, str) or not subject.isdigit() or int(subject) > USER_ID_MAX:
        raise TokenInvalidError()
    if not isinstance(session_id, str) or not session_id:
        raise TokenInvalidError()
    return int(subject), session_id
