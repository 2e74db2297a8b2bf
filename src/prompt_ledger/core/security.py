"""Bearer token helpers that bind a caller address to a request."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from prompt_ledger.core.settings import settings
from prompt_ledger.utils.identifiers import normalize_address


def create_access_token(address: str, expires_minutes: int | None = None) -> str:
    """Create a JWT whose subject is the caller's canonical address."""
    sub = normalize_address(address)
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    to_encode: dict[str, object] = {
        "sub": sub,
        "exp": datetime.now(UTC) + timedelta(minutes=minutes),
    }
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_caller(token: str) -> str:
    """Return the canonical caller address carried by ``token``.

    Raises:
        ValueError: If the token is invalid, expired, or its subject is not
            a well-formed address.
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as err:
        raise ValueError("Could not validate credentials") from err
    subject = payload.get("sub")
    if not isinstance(subject, str):
        raise ValueError("Token has no subject")
    return normalize_address(subject)
