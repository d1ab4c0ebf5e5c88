from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import jwt

from tocr.core.config import settings

# Login happens at the OAuth identity provider; this service only verifies the
# session tokens it hands out. Token creation is kept for local tooling/tests.


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
    extra_claims: dict | None = None,
) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.auth_access_token_ttl_minutes)

    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {**(extra_claims or {}), "sub": subject, "exp": expire}
    return jwt.encode(
        to_encode, settings.auth_secret_key, algorithm=settings.auth_algorithm
    )


def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token, settings.auth_secret_key, algorithms=[settings.auth_algorithm]
    )
