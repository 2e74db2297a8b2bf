"""Shared API dependencies for authentication and ledger access."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from prompt_ledger.core.security import decode_caller
from prompt_ledger.db.session import get_db
from prompt_ledger.services.ledger import Ledger, build_ledger
from prompt_ledger.utils.identifiers import parse_identifier

# Missing credentials are reported as 401 by ``get_caller`` rather than by the scheme.
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_ledger(db: SessionDep) -> Ledger:
    """Build the ledger for the current request's database session."""
    return build_ledger(db)


def get_caller(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> str:
    """Return the caller address from the bearer token.

    Raises:
        HTTPException: If the token is missing or invalid.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_caller(credentials.credentials)
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        ) from err


def path_identifier(value: str) -> bytes:
    """Decode an identifier taken from the URL path.

    Raises:
        HTTPException: If the value is not 64 hex digits.
    """
    try:
        return parse_identifier(value)
    except ValueError as err:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(err),
        ) from err


LedgerDep = Annotated[Ledger, Depends(get_ledger)]
CallerDep = Annotated[str, Depends(get_caller)]
