"""
Storage abstraction layer for media files.
Supports both local filesystem (development) and S3 (production).

The application only ever stores opaque storage ids; clients upload raw
bytes straight to the URL returned by generate_upload_url().
"""

import re
import uuid
from pathlib import Path
from typing import Optional, BinaryIO
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
import boto3
from botocore.exceptions import ClientError
from jose import jwt, JWTError
import logging

from config import settings

logger = logging.getLogger(__name__)

_UPLOAD_TOKEN_TYP = "media_upload"

# Ids come from new_storage_id(): 32 lowercase hex chars
_STORAGE_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def new_storage_id() -> str:
    return uuid.uuid4().hex


def is_valid_storage_id(storage_id) -> bool:
    return isinstance(storage_id, str) and _STORAGE_ID_RE.match(storage_id) is not None


class StorageBackend(ABC):
    """Abstract base class for storage backends"""

    @abstractmethod
    def generate_upload_url(self) -> tuple[str, str]:
        """
        Reserve a storage id and return (storage_id, upload_url).
        The caller PUTs the raw bytes to upload_url.
        """
        pass

    @abstractmethod
    def get_url(self, storage_id: str) -> Optional[str]:
        """
        Get access URL for a stored file, or None if nothing is stored under the id
        """
        pass

    @abstractmethod
    def delete(self, storage_id: str) -> bool:
        """
        Delete file from storage
        """
        pass

    @abstractmethod
    def exists(self, storage_id: str) -> bool:
        """
        True when bytes have been uploaded under a well-formed storage id
        """
        pass


class LocalFileStorage(StorageBackend):
    """Local filesystem storage for development"""

    def __init__(
        self,
        base_dir: str = "uploads",
        base_url: str = "http://localhost:8000",
        signing_key: str = settings.MEDIA_SIGNING_KEY,
        upload_ttl_sec: int = 600,
    ):
        self.base_dir = Path(base_dir)
        self.base_url = base_url.rstrip("/")
        self.signing_key = signing_key
        self.upload_ttl_sec = upload_ttl_sec
        self.base_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"LocalFileStorage initialized: base_dir={self.base_dir}, base_url={self.base_url}")

    def _path(self, storage_id: str) -> Path:
        # refuse anything that could escape base_dir
        if not is_valid_storage_id(storage_id):
            raise ValueError(f"Invalid storage id: {storage_id!r}")
        return self.base_dir / storage_id

    def make_upload_token(self, storage_id: str) -> str:
        expire = datetime.now(timezone.utc) + timedelta(seconds=self.upload_ttl_sec)
        return jwt.encode(
            {"sid": storage_id, "typ": _UPLOAD_TOKEN_TYP, "exp": expire},
            self.signing_key,
            algorithm="HS256",
        )

    def verify_upload_token(self, storage_id: str, token: str) -> bool:
        try:
            claims = jwt.decode(token, self.signing_key, algorithms=["HS256"])
        except JWTError:
            return False
        return claims.get("typ") == _UPLOAD_TOKEN_TYP and claims.get("sid") == storage_id

    def generate_upload_url(self) -> tuple[str, str]:
        storage_id = new_storage_id()
        token = self.make_upload_token(storage_id)
        return storage_id, f"{self.base_url}/v1/media/uploads/{storage_id}?token={token}"

    def save(self, storage_id: str, file_data: BinaryIO) -> str:
        """Write the uploaded bytes under storage_id; returns the access URL."""
        file_path = self._path(storage_id)
        with open(file_path, 'wb') as f:
            f.write(file_data.read())
        logger.info(f"Saved file locally: {storage_id}")
        return self.get_url(storage_id)

    def exists(self, storage_id: str) -> bool:
        return is_valid_storage_id(storage_id) and self._path(storage_id).is_file()

    def delete(self, storage_id: str) -> bool:
        """Delete file from local filesystem"""
        if self.exists(storage_id):
            self._path(storage_id).unlink()
            logger.info(f"Deleted file: {storage_id}")
            return True
        logger.warning(f"File not found for deletion: {storage_id}")
        return False

    def get_url(self, storage_id: str) -> Optional[str]:
        """Get access URL for local file"""
        if not self.exists(storage_id):
            return None
        return f"{self.base_url}/uploads/{storage_id}"


class S3Storage(StorageBackend):
    """AWS S3/MinIO storage for production"""

    def __init__(
        self,
        bucket_name: str,
        aws_access_key: Optional[str] = None,
        aws_secret_key: Optional[str] = None,
        region: str = "us-east-1",
        endpoint_url: Optional[str] = None,  # For MinIO compatibility
        public_base_url: Optional[str] = None,
        url_ttl_sec: int = 600,
    ):
        self.bucket_name = bucket_name
        self.region = region
        self.public_base_url = public_base_url
        self.endpoint_url = endpoint_url
        self.url_ttl_sec = url_ttl_sec

        # Initialize S3 client
        session = boto3.session.Session()
        self.s3_client = session.client(
            's3',
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=aws_access_key,
            aws_secret_access_key=aws_secret_key
        )

        logger.info(f"S3Storage initialized: bucket={bucket_name}, endpoint={endpoint_url}")

    def generate_upload_url(self) -> tuple[str, str]:
        """Presigned PUT for a freshly reserved key."""
        storage_id = new_storage_id()
        try:
            url = self.s3_client.generate_presigned_url(
                'put_object',
                Params={'Bucket': self.bucket_name, 'Key': storage_id},
                ExpiresIn=self.url_ttl_sec
            )
        except ClientError as e:
            logger.error(f"Error generating upload URL: {e}")
            raise
        return storage_id, url

    def exists(self, storage_id: str) -> bool:
        if not is_valid_storage_id(storage_id):
            return False
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=storage_id)
        except ClientError:
            return False
        return True

    def delete(self, storage_id: str) -> bool:
        """Delete file from S3"""
        if not is_valid_storage_id(storage_id):
            logger.warning(f"Refusing to delete malformed storage id: {storage_id!r}")
            return False
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=storage_id)
            logger.info(f"Deleted from S3: {storage_id}")
            return True
        except ClientError as e:
            logger.error(f"Error deleting from S3: {e}")
            return False

    def get_url(self, storage_id: str) -> Optional[str]:
        """Public URL when a public base is configured, otherwise a presigned GET"""
        if not is_valid_storage_id(storage_id):
            return None
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{storage_id}"
        try:
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket_name, 'Key': storage_id},
                ExpiresIn=self.url_ttl_sec
            )
        except ClientError as e:
            logger.error(f"Error generating presigned URL: {e}")
            return None


_storage: Optional[StorageBackend] = None


# Factory function to get storage backend based on environment
def get_storage_backend() -> StorageBackend:
    """
    Get the process-wide storage backend selected by STORAGE_TYPE.
    Also used as a FastAPI dependency (override it in tests).
    """
    global _storage
    if _storage is not None:
        return _storage

    if settings.STORAGE_TYPE == "s3":
        _storage = S3Storage(
            bucket_name=settings.S3_BUCKET_NAME,
            region=settings.AWS_REGION,
            endpoint_url=settings.S3_ENDPOINT_URL,
            public_base_url=settings.S3_PUBLIC_BASE_URL,
            url_ttl_sec=settings.UPLOAD_URL_TTL_SEC,
        )
    else:
        # Local filesystem storage
        _storage = LocalFileStorage(
            base_dir=settings.UPLOAD_DIR,
            base_url=settings.BASE_URL,
            upload_ttl_sec=settings.UPLOAD_URL_TTL_SEC,
        )
    return _storage
