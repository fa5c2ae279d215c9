from datetime import datetime, timedelta, timezone

from django.conf import settings
from jose import JWTError, jwt


class InvalidToken(Exception):
    pass


def issue_token(user) -> str:
    """Sign a bearer token identifying `user`, valid for JWT_EXPIRATION_DAYS."""
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user.pk,
        # Informational only; authorization re-reads the stored role
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(days=settings.JWT_EXPIRATION_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict:
    """
    Verify signature and expiry and return the token payload.

    Raises:
        InvalidToken: If the token is malformed, tampered with, expired or
            carries no user id.
    """
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc

    if payload.get("userId") is None:
        raise InvalidToken("Token carries no user id")
    return payload
