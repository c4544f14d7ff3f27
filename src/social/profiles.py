"""
Profile store.

A user has at most one profile, created explicitly after sign-in. The
profile carries the gamification totals (points, level, badges) and a
role-specific field bag. Reads attach the resolved profile photo URL.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from model.profiles.profile import UserProfile
from model.social.enum import MediaPurpose, ProfileRole
from src.storage import StorageBackend
from src.utils import _now_utc, row_to_dict
from .errors import AlreadyExists, InvalidArgument, NotFound
from .graph import FollowManager
from .identity import Caller
from .media import MediaRegistry
from .points import AwardResult, PointsLedger, WELCOME_BONUS

logger = logging.getLogger(__name__)

# Fields a profile owner may patch. role and the gamification totals are not among them.
PATCHABLE_FIELDS = frozenset({
    "display_name", "bio", "location", "website", "phone",
    "business_name", "business_category", "business_hours", "business_services",
    "vehicle_type", "delivery_radius", "availability",
    "interests", "favorite_verses",
})

DEFAULT_BADGES = ["newcomer"]


def serialize_profile(profile: UserProfile, storage: Optional[StorageBackend]) -> Dict[str, Any]:
    data = row_to_dict(profile)
    data["badges"] = list(profile.badges or [])
    photo_url = None
    if profile.profile_photo_id and storage is not None:
        photo_url = storage.get_url(profile.profile_photo_id)
    data["profile_photo_url"] = photo_url
    return data


class ProfileManager:
    def __init__(self, db: Session, storage: Optional[StorageBackend] = None):
        self.db = db
        self.storage = storage
        self.ledger = PointsLedger(db)
        self.graph = FollowManager(db, storage)
        self.media = MediaRegistry(db, storage)

    def get_profile(self, user_id: int) -> Optional[UserProfile]:
        return self.db.scalar(select(UserProfile).where(UserProfile.user_id == user_id))

    def _require_profile(self, user_id: int) -> UserProfile:
        profile = self.get_profile(user_id)
        if profile is None:
            raise NotFound("Profile not found")
        return profile

    # ------------------------------------------------------------------
    # Creation / own profile
    # ------------------------------------------------------------------
    def create_profile(self, caller: Caller, role: str, display_name: str, bio: Optional[str] = None) -> UserProfile:
        try:
            role = ProfileRole(role)
        except ValueError:
            raise InvalidArgument(f"Unknown role: {role}")
        if not display_name or not display_name.strip():
            raise InvalidArgument("Display name is required")

        if self.get_profile(caller.user_id) is not None:
            raise AlreadyExists("Profile already exists")

        profile = UserProfile(
            user_id=caller.user_id,
            role=role.value,
            display_name=display_name.strip(),
            bio=bio,
            points=WELCOME_BONUS,
            level=1,
            badges=list(DEFAULT_BADGES),
            joined_at=_now_utc(),
        )
        self.db.add(profile)
        self.ledger.record(caller.user_id, WELCOME_BONUS, "welcome", "Welcome to Vhiem! 🙏")
        try:
            self.db.commit()
        except IntegrityError:
            # unique(user_id) caught a concurrent create
            self.db.rollback()
            raise AlreadyExists("Profile already exists")

        logger.info("Created %s profile %s for user %s", role.value, profile.id, caller.user_id)
        return profile

    def get_own_profile(self, caller: Optional[Caller]) -> Optional[Dict[str, Any]]:
        """None when unauthenticated or when the user has no profile yet."""
        if caller is None:
            return None
        profile = self.get_profile(caller.user_id)
        if profile is None:
            return None
        return serialize_profile(profile, self.storage)

    def update_profile(self, caller: Caller, fields: Dict[str, Any]) -> None:
        """
        Sparse patch: only keys present in `fields` are written. A present
        empty value still overwrites; an absent key leaves the column alone.
        """
        profile = self._require_profile(caller.user_id)

        unknown = set(fields) - PATCHABLE_FIELDS
        if unknown:
            raise InvalidArgument(f"Fields not editable: {', '.join(sorted(unknown))}")
        if "display_name" in fields and fields["display_name"] is None:
            raise InvalidArgument("Display name cannot be null")

        for field, value in fields.items():
            setattr(profile, field, value)

        self.db.commit()
        logger.info("Updated profile fields %s for user %s", sorted(fields), caller.user_id)

    # ------------------------------------------------------------------
    # Photo
    # ------------------------------------------------------------------
    def generate_upload_url(self, caller: Caller) -> tuple[str, str]:
        return self.media.reserve(caller, MediaPurpose.profile_photo)

    def set_profile_photo(self, caller: Caller, storage_id: str) -> None:
        """Attach a photo the caller uploaded; the previously stored one is deleted first."""
        profile = self._require_profile(caller.user_id)
        self.media.require_attachable(caller, storage_id, MediaPurpose.profile_photo)
        if profile.profile_photo_id and profile.profile_photo_id != storage_id:
            self.storage.delete(profile.profile_photo_id)
        profile.profile_photo_id = storage_id
        self.db.commit()

    def clear_profile_photo(self, caller: Caller) -> None:
        profile = self._require_profile(caller.user_id)
        if profile.profile_photo_id:
            self.storage.delete(profile.profile_photo_id)
        profile.profile_photo_id = None
        self.db.commit()

    # ------------------------------------------------------------------
    # Points
    # ------------------------------------------------------------------
    def award_points(self, caller: Caller, delta: int, action: str, description: str) -> AwardResult:
        result = self.ledger.award(caller.user_id, delta, action, description)
        self.db.commit()
        return result

    def point_history(self, caller: Caller, limit: int = 50):
        return self.ledger.history(caller.user_id, limit)

    # ------------------------------------------------------------------
    # Public reads
    # ------------------------------------------------------------------
    def get_profile_by_user_id(self, viewer: Optional[Caller], user_id: int) -> Optional[Dict[str, Any]]:
        """Someone's profile with follow counts and the viewer's relation to it."""
        profile = self.get_profile(user_id)
        if profile is None:
            return None

        data = serialize_profile(profile, self.storage)
        counts = self.graph.follow_counts(user_id)
        is_self = viewer is not None and viewer.user_id == user_id
        data.update(
            follower_count=counts["followers"],
            following_count=counts["following"],
            is_following=bool(viewer) and not is_self and self.graph.is_following(viewer, user_id),
            can_follow=viewer is not None and not is_self,
            is_own_profile=is_self,
        )
        return data

    def leaderboard(self, limit: int = 10) -> List[Dict[str, Any]]:
        profiles = self.db.scalars(
            select(UserProfile)
            .order_by(UserProfile.points.desc(), UserProfile.id.asc())
            .limit(limit)
        )
        return [serialize_profile(p, self.storage) for p in profiles]

    def list_people(self, viewer: Optional[Caller], limit: int = 50) -> List[Dict[str, Any]]:
        """Directory of the newest profiles with the viewer's follow status."""
        profiles = self.db.scalars(
            select(UserProfile).order_by(UserProfile.id.desc()).limit(limit)
        )
        out = []
        for p in profiles:
            data = serialize_profile(p, self.storage)
            is_self = viewer is not None and viewer.user_id == p.user_id
            data["is_following"] = bool(viewer) and not is_self and self.graph.is_following(viewer, p.user_id)
            data["can_follow"] = viewer is not None and not is_self
            out.append(data)
        return out
