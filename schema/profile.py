from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


Role = Literal["shopper", "business", "delivery_driver"]


# ------------------------------------------------------------
# Requests
# ------------------------------------------------------------
class ProfileCreate(BaseModel):
    role: Role
    display_name: str = Field(min_length=1, max_length=255)
    bio: Optional[str] = None


class ProfileUpdate(BaseModel):
    """
    Sparse patch. Only keys present in the request body are applied
    (model_dump(exclude_unset=True)); an explicit "" still overwrites.
    """
    model_config = ConfigDict(extra="forbid")

    display_name: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    # Business
    business_name: Optional[str] = None
    business_category: Optional[str] = None
    business_hours: Optional[str] = None
    business_services: Optional[List[str]] = None
    # Delivery driver
    vehicle_type: Optional[str] = None
    delivery_radius: Optional[float] = None
    availability: Optional[str] = None
    # Shopper
    interests: Optional[List[str]] = None
    favorite_verses: Optional[List[str]] = None


class ProfilePhotoIn(BaseModel):
    storage_id: str = Field(min_length=1, max_length=255)


class PointsAwardIn(BaseModel):
    points: int
    action: str = Field(min_length=1, max_length=64)
    description: str = Field(min_length=1, max_length=255)


# ------------------------------------------------------------
# Responses
# ------------------------------------------------------------
class ProfileOut(BaseModel):
    id: int
    user_id: int
    role: Role
    display_name: str
    bio: Optional[str] = None
    points: int
    level: int
    badges: List[str] = []
    joined_at: datetime
    profile_photo_id: Optional[str] = None
    profile_photo_url: Optional[str] = None

    location: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None

    business_name: Optional[str] = None
    business_category: Optional[str] = None
    business_hours: Optional[str] = None
    business_services: Optional[List[str]] = None

    vehicle_type: Optional[str] = None
    delivery_radius: Optional[float] = None
    availability: Optional[str] = None

    interests: Optional[List[str]] = None
    favorite_verses: Optional[List[str]] = None

    model_config = ConfigDict(from_attributes=True)


class ProfileCreatedOut(BaseModel):
    profile_id: int


class ProfileDetailOut(ProfileOut):
    follower_count: int = 0
    following_count: int = 0
    is_following: bool = False
    can_follow: bool = False
    is_own_profile: bool = False


class PersonOut(ProfileOut):
    is_following: bool = False
    can_follow: bool = False


class UploadUrlOut(BaseModel):
    storage_id: str
    upload_url: str


class PointsAwardOut(BaseModel):
    new_points: int
    new_level: int


class PointTransactionOut(BaseModel):
    id: int
    points: int
    action: str
    description: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OkOut(BaseModel):
    ok: bool = True


__all__ = [
    "ProfileCreate",
    "ProfileUpdate",
    "ProfilePhotoIn",
    "PointsAwardIn",
    "ProfileOut",
    "ProfileCreatedOut",
    "ProfileDetailOut",
    "PersonOut",
    "UploadUrlOut",
    "PointsAwardOut",
    "PointTransactionOut",
    "OkOut",
]
