# model/user.py
from sqlalchemy import Column, String, Boolean, TIMESTAMP, DateTime as SADateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from model.base import Base, IdType


class Users(Base):
    """
    Internal user record linked to an identity-provider subject.
    Created on the first authenticated request; never deleted in-flow.
    """
    __tablename__ = "users"

    id = Column(IdType, primary_key=True, autoincrement=True)
    external_id = Column(String(255), unique=True, index=True, nullable=True, comment="Identity provider subject")
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)

    # Optional claims synced from the identity provider
    profile_photo_url = Column(String(1024))
    nickname = Column(String(120))
    given_name = Column(String(120))
    family_name = Column(String(120))
    phone_number = Column(String(32))
    email_verified = Column(Boolean)
    phone_number_verified = Column(Boolean)
    provider_updated_at = Column(SADateTime)

    created_at = Column(TIMESTAMP, server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(TIMESTAMP, server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    profile = relationship("UserProfile", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<Users(id={self.id}, external_id={self.external_id!r})>"
