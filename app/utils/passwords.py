# app/utils/passwords.py
"""Password hashing helpers (werkzeug.security, salted scrypt/pbkdf2)."""

from werkzeug.security import generate_password_hash, check_password_hash


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return check_password_hash(password_hash, password)
