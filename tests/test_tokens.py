# tests/test_tokens.py
import jwt
import pytest
from datetime import datetime, timedelta, timezone
from app.config import settings
from app.exceptions import UnauthorizedException
from app.models.enums import Role
from app.utils.tokens import generate_token, verify_token


def test_claims_survive_signing():
    claims = verify_token(generate_token(42, Role.ADMIN))
    assert claims.user_id == 42
    assert claims.role == Role.ADMIN


def test_expired_token():
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = jwt.encode({"sub": "1", "role": "USER", "iat": past, "exp": past + timedelta(minutes=5)},
                       settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(UnauthorizedException) as exc:
        verify_token(token)
    assert exc.value.message == "Token expired"


def test_token_signed_with_other_secret():
    token = jwt.encode({"sub": "1", "role": "ADMIN"}, "someone-elses-secret-of-sufficient-length",
                       algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(UnauthorizedException) as exc:
        verify_token(token)
    assert exc.value.message == "Invalid token"


def test_garbage_and_missing_claims():
    with pytest.raises(UnauthorizedException):
        verify_token("not-a-jwt")
    token = jwt.encode({"role": "USER"}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(UnauthorizedException):
        verify_token(token)
