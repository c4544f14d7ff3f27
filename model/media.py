# model/media.py
"""
Storage ids handed out by the upload-url routes.

A row is written when a user asks for an upload URL, so a storage id can
only be attached by the user who reserved it, and only for the purpose it
was reserved for (profile photo or post photo).
"""

from sqlalchemy import Column, String, TIMESTAMP, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func

from model.base import Base, IdType

MediaPurposeEnum = SAEnum("profile_photo", "post_photo", name="media_purpose_enum")


class MediaUpload(Base):
    __tablename__ = "media_uploads"

    id = Column(IdType, primary_key=True, autoincrement=True)
    storage_id = Column(String(255), unique=True, index=True, nullable=False)
    owner_id = Column(IdType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    purpose = Column(MediaPurposeEnum, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.current_timestamp(), nullable=False)

    def __repr__(self):
        return f"<MediaUpload(storage_id={self.storage_id!r}, owner_id={self.owner_id}, purpose={self.purpose!r})>"
