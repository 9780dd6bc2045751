"""
JWT and password helpers for Metabolic Health auth.
Tokens travel as `Authorization: Bearer <jwt>`; nothing is stored server-side.
"""
import logging
import time
from typing import Optional

import jwt
from fastapi import Request
from passlib.context import CryptContext

from metabolic_health.config import get_secret_key, settings
from metabolic_health.core.errors import Unauthenticated

logger = logging.getLogger(__name__)
pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)

JWT_ALGORITHM = "HS256"
BEARER_PREFIX = "bearer "

# Verified against when the email is unknown so both login failure paths cost the same
_DUMMY_HASH: Optional[str] = None


def create_jwt(user_id: str, email: str, issued_at: Optional[int] = None) -> str:
    iat = int(time.time()) if issued_at is None else issued_at
    payload = {
        "sub": user_id,
        "email": email,
        "iat": iat,
        "exp": iat + settings.auth_token_ttl_seconds,
    }
    return jwt.encode(payload, get_secret_key(), algorithm=JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """Validate signature and expiry. Raises Unauthenticated on any failure."""
    if not token:
        raise Unauthenticated("Access token required")
    try:
        payload = jwt.decode(
            token,
            get_secret_key(),
            algorithms=[JWT_ALGORITHM],
            options={"require": ["sub", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("JWT expired")
        raise Unauthenticated()
    except jwt.PyJWTError as e:
        logger.debug("JWT decode failed: %s", e)
        raise Unauthenticated()
    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        raise Unauthenticated()
    return payload


def get_bearer_token(request: Request) -> Optional[str]:
    """Return the token from `Authorization: Bearer ...`, or None if absent/malformed."""
    header = request.headers.get("authorization") or ""
    if not header.lower().startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX):].strip()
    return token or None


def hash_password(password: str) -> str:
    return pwd_ctx.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    try:
        return pwd_ctx.verify(plain, hashed)
    except ValueError:
        return False


def burn_password_check(plain: str) -> None:
    """Run a throwaway hash verification (used when the account does not exist)."""
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = pwd_ctx.hash("not-a-real-password")
    pwd_ctx.verify(plain, _DUMMY_HASH)
