"""Admin bearer tokens built on python-jose JWTs."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from slapboard.core.settings import settings

ADMIN_ROLE = "admin"


def create_admin_token(subject: str, expires_minutes: int | None = None) -> str:
    """Create a signed admin token.

    Args:
        subject: Identifier of the moderator the token is issued to.
        expires_minutes: Lifetime override; defaults to the configured expiry.

    Returns:
        Encoded JWT carrying the admin role claim.
    """
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    to_encode: dict[str, object] = {
        "sub": subject,
        "role": ADMIN_ROLE,
        "exp": datetime.now(UTC) + timedelta(minutes=minutes),
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_admin_token(token: str) -> str | None:
    """Return the token subject if it is a valid admin token, otherwise None."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None

    subject = payload.get("sub")
    if subject is None or payload.get("role") != ADMIN_ROLE:
        return None
    return str(subject)
