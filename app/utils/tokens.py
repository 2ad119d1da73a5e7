# app/utils/tokens.py
"""
Token issuer/verifier for bearer authentication.
Tokens are HS256 JWTs carrying the user id (`sub`) and role.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from app.config import settings
from app.exceptions import UnauthorizedException
from app.models.enums import Role


@dataclass
class TokenClaims:
    user_id: int
    role: Role


def generate_token(user_id: int, role: Role = Role.USER) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "role": Role(role).value,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRES_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> TokenClaims:
    """Decode and validate a token. Raises UnauthorizedException if invalid or expired."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        return TokenClaims(user_id=int(payload["sub"]), role=Role(payload["role"]))
    except jwt.ExpiredSignatureError:
        raise UnauthorizedException("Token expired")
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedException("Invalid token")
