"""
Social graph: directed follow edges between users.

follow/unfollow are toggles: "nothing to do" is reported as False, never
raised. Counts are aggregated from the edges on every read.
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy import select, func, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from model.followers import Follow
from model.profiles.profile import UserProfile
from model.user import Users
from src.storage import StorageBackend
from .errors import InvalidArgument, NotFound
from .identity import Caller

logger = logging.getLogger(__name__)


class FollowManager:
    def __init__(self, db: Session, storage: Optional[StorageBackend] = None):
        self.db = db
        self.storage = storage

    def _edge(self, follower_id: int, following_id: int) -> Optional[Follow]:
        return self.db.scalar(
            select(Follow).where(
                and_(
                    Follow.follower_id == follower_id,
                    Follow.following_id == following_id,
                )
            )
        )

    def follow(self, caller: Caller, target_user_id: int) -> bool:
        """Create the caller -> target edge. False if it already exists."""
        if caller.user_id == target_user_id:
            raise InvalidArgument("Cannot follow yourself")
        if self.db.get(Users, target_user_id) is None:
            raise NotFound("User not found")

        if self._edge(caller.user_id, target_user_id):
            return False

        self.db.add(Follow(follower_id=caller.user_id, following_id=target_user_id))
        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent follow of the same pair won the unique constraint
            self.db.rollback()
            return False

        logger.info("User %s followed %s", caller.user_id, target_user_id)
        return True

    def unfollow(self, caller: Caller, target_user_id: int) -> bool:
        """Delete the caller -> target edge. False if there was none."""
        edge = self._edge(caller.user_id, target_user_id)
        if edge is None:
            return False

        self.db.delete(edge)
        self.db.commit()
        logger.info("User %s unfollowed %s", caller.user_id, target_user_id)
        return True

    def is_following(self, caller: Optional[Caller], target_user_id: int) -> bool:
        if caller is None:
            return False
        return self._edge(caller.user_id, target_user_id) is not None

    def follower_count(self, user_id: int) -> int:
        return self.db.scalar(
            select(func.count(Follow.id)).where(Follow.following_id == user_id)
        ) or 0

    def following_count(self, user_id: int) -> int:
        return self.db.scalar(
            select(func.count(Follow.id)).where(Follow.follower_id == user_id)
        ) or 0

    def follow_counts(self, user_id: int) -> Dict[str, int]:
        return {
            "followers": self.follower_count(user_id),
            "following": self.following_count(user_id),
        }

    def _edge_list(self, edge_user_col, filter_col, user_id: int, limit: int) -> List[dict]:
        rows = self.db.execute(
            select(Follow, edge_user_col, UserProfile)
            .join(UserProfile, UserProfile.user_id == edge_user_col, isouter=True)
            .where(filter_col == user_id)
            .order_by(Follow.id.desc())
            .limit(limit)
        ).all()

        out = []
        for follow, other_id, profile in rows:
            photo_url = None
            if profile is not None and profile.profile_photo_id and self.storage is not None:
                photo_url = self.storage.get_url(profile.profile_photo_id)
            out.append({
                "user_id": other_id,
                "display_name": profile.display_name if profile else None,
                "profile_photo_url": photo_url,
                "followed_at": follow.created_at,
            })
        return out

    def list_followers(self, user_id: int, limit: int = 50) -> List[dict]:
        """Users following user_id, newest edge first."""
        return self._edge_list(Follow.follower_id, Follow.following_id, user_id, limit)

    def list_following(self, user_id: int, limit: int = 50) -> List[dict]:
        """Users that user_id follows, newest edge first."""
        return self._edge_list(Follow.following_id, Follow.follower_id, user_id, limit)
