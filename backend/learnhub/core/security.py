"""
Credential handling for LearnHub.

Passwords are stored as bcrypt hashes; sessions are stateless JWT bearer
tokens whose subject is the account's username.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from jose import JWTError, jwt
from passlib.context import CryptContext

from .config import settings


ACCESS_TOKEN_TYPE = "access"

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    username: str,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    """
    Issue a bearer token for a user.

    Args:
        username: Account the token authenticates
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES
        extra_claims: Claims merged into the payload

    Returns:
        str: The signed JWT
    """
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    claims = dict(extra_claims or {})
    claims.update({
        "sub": username,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    })
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Signature- and expiry-checked payload, or None."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


def username_from_token(token: str) -> Optional[str]:
    """
    Username carried by a valid access token.

    Returns None for expired, tampered or non-access tokens.
    """
    payload = decode_token(token)
    if payload is None or payload.get("type") != ACCESS_TOKEN_TYPE:
        return None
    return payload.get("sub")


def password_issues(password: str) -> List[str]:
    """
    Reasons a registration password is refused; empty when acceptable.

    Requires eight characters with at least one letter and one digit.
    """
    issues = []
    if len(password) < 8:
        issues.append("Password should be at least 8 characters long")
    if not any(c.isalpha() for c in password):
        issues.append("Password should contain at least one letter")
    if not any(c.isdigit() for c in password):
        issues.append("Password should contain at least one number")
    return issues
