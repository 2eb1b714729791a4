"""Password hashing and JWT identity tokens."""

import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any

from fastapi.security import HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from estate_backend.core.config import settings
from estate_backend.core.exceptions import ExpiredTokenError, InvalidTokenError

# JWT bearer scheme
security_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    pwd_bytes = password.encode("utf-8")
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(pwd_bytes, salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    pwd_bytes = plain_password.encode("utf-8")
    hashed_bytes = hashed_password.encode("utf-8")
    return bcrypt.checkpw(pwd_bytes, hashed_bytes)


def issue_token(
    user_id: int,
    extra: Optional[Dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign an access token for ``user_id``.

    ``extra`` claims are informational only; role data is never read back
    from the token.
    """
    to_encode = dict(extra or {})
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.JWT_EXPIRY_DAYS)
    )
    to_encode.update({"sub": str(user_id), "exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token.

    Raises:
        ExpiredTokenError: The token is past its ``exp``.
        InvalidTokenError: Bad signature or malformed token.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise ExpiredTokenError("Token expired")
    except JWTError:
        raise InvalidTokenError("Invalid token")


def verify_token(token: str) -> int:
    """Return the user id carried by a valid access token."""
    payload = decode_token(token)
    if payload.get("type") != "access":
        raise InvalidTokenError("Invalid token type")
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise InvalidTokenError("Invalid token payload")
