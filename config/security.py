"""
config.security
---------------
Authentication helpers for FastAPI routes.

Sign-in is handled entirely by the external identity provider; this
service only verifies the bearer token it issues. This module defines:
- verify_token()  → IdentityClaims from a provider JWT
- get_identity_optional()  → claims or None (no/invalid token)
- require_caller()  → Caller for the signed-in user (creates the Users row on first sight)
- get_caller_optional()  → Caller or None
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import jwt
from jose.exceptions import JWTError, ExpiredSignatureError
from pydantic import ValidationError
from sqlalchemy.orm import Session
import logging

from config.db import get_db
from config.settings import AUTH_JWT_KEY, AUTH_JWT_ALGORITHMS, AUTH_JWT_ISSUER, AUTH_JWT_AUDIENCE
from src.social import errors
from src.social.identity import Caller, IdentityClaims, resolve_caller, require_caller as _require_caller

logger = logging.getLogger(__name__)

_LEEWAY = 10  # seconds of clock-skew tolerance

# tokenUrl is informational only (the provider issues tokens); auto_error off so
# we raise our own Unauthenticated instead of FastAPI's 401.
oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="/v1/auth/token", auto_error=False)


# ---------------------------------------------------------------------------
# TOKEN HELPERS
# ---------------------------------------------------------------------------
def verify_token(token: str) -> IdentityClaims:
    """
    Decode a provider JWT and return its identity claims.
    Raise Unauthenticated for any problem with the token.
    """
    options = {"verify_aud": AUTH_JWT_AUDIENCE is not None, "leeway": _LEEWAY}
    try:
        payload = jwt.decode(
            token,
            AUTH_JWT_KEY,
            algorithms=AUTH_JWT_ALGORITHMS,
            audience=AUTH_JWT_AUDIENCE,
            issuer=AUTH_JWT_ISSUER,
            options=options,
        )
    except ExpiredSignatureError:
        raise errors.Unauthenticated("Token expired")
    except JWTError as e:
        logger.warning("JWT decode error: %s", e)
        raise errors.Unauthenticated("Invalid token")

    try:
        return IdentityClaims.model_validate(payload)
    except ValidationError:
        raise errors.Unauthenticated("Token has no usable subject")


# ---------------------------------------------------------------------------
# DEPENDENCIES
# ---------------------------------------------------------------------------
def get_identity_optional(token: Optional[str] = Depends(oauth2_scheme_optional)) -> Optional[IdentityClaims]:
    """Claims when a valid token is presented, otherwise None (no error)."""
    if not token:
        return None
    try:
        return verify_token(token)
    except errors.Unauthenticated:
        return None


def get_identity(token: Optional[str] = Depends(oauth2_scheme_optional)) -> IdentityClaims:
    """Require a valid token."""
    if not token:
        raise errors.Unauthenticated("Not authenticated")
    return verify_token(token)


def require_caller(
    db: Session = Depends(get_db), identity: IdentityClaims = Depends(get_identity)
) -> Caller:
    return _require_caller(db, identity)


def get_caller_optional(
    db: Session = Depends(get_db), identity: Optional[IdentityClaims] = Depends(get_identity_optional)
) -> Optional[Caller]:
    return resolve_caller(db, identity)
