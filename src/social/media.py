"""
Media references: who may attach which storage id.

Upload URLs are only handed out through MediaRegistry.reserve(), which
records the reserving user and what the upload is for. Attaching a photo
goes through require_attachable(), so a profile or post can only point at
bytes its own author uploaded for that purpose.
"""
import logging
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from model.media import MediaUpload
from model.social.enum import MediaPurpose
from src.storage import StorageBackend, is_valid_storage_id
from .errors import InvalidArgument
from .identity import Caller

logger = logging.getLogger(__name__)


class MediaRegistry:
    def __init__(self, db: Session, storage: Optional[StorageBackend]):
        self.db = db
        self.storage = storage

    def reserve(self, caller: Caller, purpose: MediaPurpose) -> Tuple[str, str]:
        """New (storage_id, upload_url) owned by the caller."""
        storage_id, url = self.storage.generate_upload_url()
        self.db.add(MediaUpload(storage_id=storage_id, owner_id=caller.user_id, purpose=purpose.value))
        self.db.commit()
        logger.info("User %s reserved %s upload %s", caller.user_id, purpose.value, storage_id)
        return storage_id, url

    def require_attachable(self, caller: Caller, storage_id: str, purpose: MediaPurpose) -> str:
        """
        Raise InvalidArgument unless storage_id is well formed, was reserved
        by the caller for `purpose`, and its bytes have been uploaded.
        """
        if not is_valid_storage_id(storage_id):
            raise InvalidArgument("Malformed storage id")

        upload = self.db.scalar(select(MediaUpload).where(MediaUpload.storage_id == storage_id))
        if upload is None or upload.owner_id != caller.user_id or upload.purpose != purpose.value:
            logger.warning("User %s tried to attach unowned %s %s", caller.user_id, purpose.value, storage_id)
            raise InvalidArgument("Unknown storage id")

        if not self.storage.exists(storage_id):
            raise InvalidArgument("Nothing has been uploaded for this storage id")
        return storage_id
