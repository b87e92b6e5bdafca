from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from jose import jwt

from trainsched.core.config import get_settings


class UserRole(str, Enum):
    admin = "admin"
    scheduler = "scheduler"
    trainer = "trainer"


@dataclass(frozen=True)
class Principal:
    """Caller identity carried by a bearer token issued by the auth service."""

    id: str
    role: UserRole


def create_access_token(
    subject: str,
    role: UserRole | str,
    expires_delta: timedelta | None = None,
) -> str:
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {
        "sub": subject,
        "role": UserRole(role).value,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
