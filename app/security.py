# app/security.py
"""
🔐 ПАРОЛИ И ТОКЕНЫ

Пароли: bcrypt (соль и cost внутри строки "$2b$12$...").
bcrypt смотрит только на первые 72 байта пароля.

Токены: JWT (PyJWT), HS256, секрет из config.jwt_secret.
В payload: sub (id сотрудника), role, type (access / refresh), exp.
"""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from app.errors import AuthenticationError
from config.settings import config

BCRYPT_MAX_BYTES = 72


def _secret(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=config.bcrypt_rounds)
    return bcrypt.hashpw(_secret(password), salt).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_secret(password), password_hash.encode("ascii"))
    except ValueError:
        # в БД не bcrypt-строка
        return False


def _encode(user, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "role": user.role.value,
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def create_access_token(user) -> str:
    return _encode(user, "access", timedelta(minutes=config.access_token_minutes))


def create_refresh_token(user) -> str:
    return _encode(user, "refresh", timedelta(days=config.refresh_token_days))


def decode_token(token: str, expected_type: str = "access") -> dict:
    """
    Проверить подпись и срок, вернуть payload.

    Любая проблема -> AuthenticationError (401).
    """
    try:
        payload = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token")

    if payload.get("type") != expected_type:
        raise AuthenticationError("Invalid token type")

    return payload
