# routes/profiles/profile.py
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import require_caller, get_caller_optional
from schema.profile import (
    ProfileCreate, ProfileCreatedOut, ProfileUpdate, ProfileOut, ProfileDetailOut, PersonOut,
    ProfilePhotoIn, UploadUrlOut, PointsAwardIn, PointsAwardOut, PointTransactionOut, OkOut,
)
from src.social import Caller, NotFound, ProfileManager
from src.storage import StorageBackend, get_storage_backend

router = APIRouter()


def get_profile_manager(
    db: Session = Depends(get_db), storage: StorageBackend = Depends(get_storage_backend)
) -> ProfileManager:
    return ProfileManager(db, storage)


# ---------- Routes: own profile ----------

@router.post("", response_model=ProfileCreatedOut, status_code=status.HTTP_201_CREATED)
def create_profile(
    payload: ProfileCreate,
    caller: Caller = Depends(require_caller),
    profiles: ProfileManager = Depends(get_profile_manager),
):
    """Create the caller's profile. Seeds 100 welcome points; 409 if one already exists."""
    profile = profiles.create_profile(caller, payload.role, payload.display_name, payload.bio)
    return {"profile_id": profile.id}


@router.get("/me", response_model=Optional[ProfileOut])
def get_own_profile(
    caller: Optional[Caller] = Depends(get_caller_optional),
    profiles: ProfileManager = Depends(get_profile_manager),
):
    """
    The caller's profile, or null when signed out or no profile exists yet.
    """
    return profiles.get_own_profile(caller)


@router.patch("/me", response_model=OkOut)
def update_profile(
    payload: ProfileUpdate,
    caller: Caller = Depends(require_caller),
    profiles: ProfileManager = Depends(get_profile_manager),
):
    profiles.update_profile(caller, payload.model_dump(exclude_unset=True))
    return {"ok": True}


# ---------- Routes: profile photo ----------

@router.post("/me/photo/upload-url", response_model=UploadUrlOut)
def generate_photo_upload_url(
    caller: Caller = Depends(require_caller),
    profiles: ProfileManager = Depends(get_profile_manager),
):
    storage_id, url = profiles.generate_upload_url(caller)
    return {"storage_id": storage_id, "upload_url": url}


@router.put("/me/photo", response_model=OkOut)
def set_profile_photo(
    payload: ProfilePhotoIn,
    caller: Caller = Depends(require_caller),
    profiles: ProfileManager = Depends(get_profile_manager),
):
    profiles.set_profile_photo(caller, payload.storage_id)
    return {"ok": True}


@router.delete("/me/photo", response_model=OkOut)
def clear_profile_photo(
    caller: Caller = Depends(require_caller),
    profiles: ProfileManager = Depends(get_profile_manager),
):
    profiles.clear_profile_photo(caller)
    return {"ok": True}


# ---------- Routes: points ----------

@router.post("/me/points", response_model=PointsAwardOut)
def award_points(
    payload: PointsAwardIn,
    caller: Caller = Depends(require_caller),
    profiles: ProfileManager = Depends(get_profile_manager),
):
    return profiles.award_points(caller, payload.points, payload.action, payload.description)


@router.get("/me/points", response_model=List[PointTransactionOut])
def point_history(
    limit: int = Query(50, ge=1, le=200),
    caller: Caller = Depends(require_caller),
    profiles: ProfileManager = Depends(get_profile_manager),
):
    return profiles.point_history(caller, limit)


# ---------- Routes: public reads ----------

@router.get("/leaderboard", response_model=List[ProfileOut])
def leaderboard(profiles: ProfileManager = Depends(get_profile_manager)):
    return profiles.leaderboard()


@router.get("/people", response_model=List[PersonOut])
def list_people(
    viewer: Optional[Caller] = Depends(get_caller_optional),
    profiles: ProfileManager = Depends(get_profile_manager),
):
    return profiles.list_people(viewer)


@router.get("/{user_id}", response_model=ProfileDetailOut)
def get_profile_by_user_id(
    user_id: int,
    viewer: Optional[Caller] = Depends(get_caller_optional),
    profiles: ProfileManager = Depends(get_profile_manager),
):
    profile = profiles.get_profile_by_user_id(viewer, user_id)
    if profile is None:
        raise NotFound("Profile not found")
    return profile
