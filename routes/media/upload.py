"""
Media upload endpoint for the local storage backend.

Clients get a signed URL from one of the upload-url routes and PUT the raw
file bytes here; the response carries the storage id to attach to a
profile or post. With S3 storage the client uploads straight to the bucket
and this route is unused.
"""

import io
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel

from config.settings import MAX_UPLOAD_BYTES
from src.storage import LocalFileStorage, StorageBackend, get_storage_backend

logger = logging.getLogger(__name__)

router = APIRouter()


class UploadResult(BaseModel):
    storage_id: str
    url: str


@router.put("/uploads/{storage_id}", response_model=UploadResult)
async def upload_media(
    storage_id: str,
    request: Request,
    token: str = Query(...),
    storage: StorageBackend = Depends(get_storage_backend),
):
    if not isinstance(storage, LocalFileStorage):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Direct uploads are not enabled")
    if not storage.verify_upload_token(storage_id, token):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired upload URL")

    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large")

    # Content-Length can be absent (chunked) or wrong; count what actually arrives
    buffer = io.BytesIO()
    async for chunk in request.stream():
        buffer.write(chunk)
        if buffer.tell() > MAX_UPLOAD_BYTES:
            raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail="File too large")

    size = buffer.tell()
    if not size:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty upload")

    buffer.seek(0)
    url = storage.save(storage_id, buffer)
    logger.info("Stored upload %s (%d bytes)", storage_id, size)
    return UploadResult(storage_id=storage_id, url=url)
