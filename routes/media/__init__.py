# routes/media/__init__.py
"""
Media module - Combines media routers under the /v1/media prefix
"""
from fastapi import APIRouter
from routes.media import upload

router = APIRouter(prefix="/v1/media", tags=["Media"])

router.include_router(upload.router)
