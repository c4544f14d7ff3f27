"""
Identity resolution: external identity-provider claims -> internal Users row.

There is exactly one strategy: look the user up by the provider subject
(users.external_id) and create the row on first sight. Every operation
receives the result as an explicit Caller value.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from model.user import Users
from .errors import InvalidArgument, Unauthenticated

logger = logging.getLogger(__name__)


class IdentityClaims(BaseModel):
    """Claims the identity provider puts in its bearer token."""
    model_config = ConfigDict(populate_by_name=True)

    subject: str = Field(alias="sub", min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None
    picture: Optional[str] = None
    nickname: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    phone_number: Optional[str] = None
    email_verified: Optional[bool] = None
    phone_number_verified: Optional[bool] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Caller:
    """The authenticated user an operation runs on behalf of."""
    user_id: int
    identity: IdentityClaims


def ensure_user(db: Session, identity: Optional[IdentityClaims]) -> Users:
    """
    Return the Users row for this identity, creating it from the claims the
    first time the subject is seen. Idempotent per subject.
    """
    if identity is None:
        raise Unauthenticated("Not authenticated")

    user = db.scalar(select(Users).where(Users.external_id == identity.subject))
    if user:
        return user

    if not identity.email:
        raise InvalidArgument("Identity has no email claim")

    user = Users(
        external_id=identity.subject,
        name=identity.name or "unknown user",
        email=identity.email,
        profile_photo_url=identity.picture,
        nickname=identity.nickname,
        given_name=identity.given_name,
        family_name=identity.family_name,
        phone_number=identity.phone_number,
        email_verified=identity.email_verified,
        phone_number_verified=identity.phone_number_verified,
        provider_updated_at=identity.updated_at,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the same subject first
        db.rollback()
        existing = db.scalar(select(Users).where(Users.external_id == identity.subject))
        if existing is None:
            raise
        return existing
    logger.info("Created user %s for subject %s", user.id, identity.subject)
    return user


def resolve_caller_user_id(db: Session, identity: Optional[IdentityClaims]) -> Optional[int]:
    """Internal user id for the identity, or None when there is no identity."""
    if identity is None:
        return None
    return int(ensure_user(db, identity).id)


def resolve_caller(db: Session, identity: Optional[IdentityClaims]) -> Optional[Caller]:
    user_id = resolve_caller_user_id(db, identity)
    if user_id is None:
        return None
    return Caller(user_id=user_id, identity=identity)


def require_caller(db: Session, identity: Optional[IdentityClaims]) -> Caller:
    caller = resolve_caller(db, identity)
    if caller is None:
        raise Unauthenticated("Not authenticated")
    return caller
