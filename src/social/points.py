"""
Gamification engine.

Every point change goes through PointsLedger.award(): read the profile, add
the delta, recompute the level, write both, append a PointTransaction. The
ledger never commits; the operation that triggered the award commits once so
the award lands in the same transaction as the action that earned it.
"""
import logging
from typing import List, Optional, TypedDict

from sqlalchemy import select
from sqlalchemy.orm import Session

from model.points import PointTransaction
from model.profiles.profile import UserProfile
from .errors import NotFound

logger = logging.getLogger(__name__)

POINTS_PER_LEVEL = 1000

WELCOME_BONUS = 100
COMMENT_POINTS = 5
REPLY_POINTS = 5
LIKE_RECEIVED_POINTS = 5

POST_POINTS = {
    "verse": 20,
    "prayer": 15,
    "testimony": 10,
    "general": 10,
}


class AwardResult(TypedDict):
    new_points: int
    new_level: int


def level_for_points(points: int) -> int:
    """Level is a pure function of points. No cap; negative totals are allowed."""
    return points // POINTS_PER_LEVEL + 1


def points_for_post(post_type: str) -> int:
    return POST_POINTS.get(post_type, POST_POINTS["general"])


class PointsLedger:
    def __init__(self, db: Session):
        self.db = db

    def _get_profile(self, user_id: int) -> Optional[UserProfile]:
        return self.db.scalar(select(UserProfile).where(UserProfile.user_id == user_id))

    def record(self, user_id: int, points: int, action: str, description: str) -> PointTransaction:
        """Append a ledger row without touching the profile total."""
        tx = PointTransaction(user_id=user_id, points=points, action=action, description=description)
        self.db.add(tx)
        return tx

    def award(
        self,
        user_id: int,
        delta: int,
        action: str,
        description: str,
        required: bool = True,
    ) -> Optional[AwardResult]:
        """
        Add delta (any integer) to the user's points and recompute the level.

        Raises NotFound when the user has no profile and `required` is set;
        otherwise the award is skipped and None is returned.
        """
        profile = self._get_profile(user_id)
        if profile is None:
            if required:
                raise NotFound("Profile not found")
            logger.warning("Skipping %s award of %s for user %s: no profile", action, delta, user_id)
            return None

        new_points = profile.points + delta
        new_level = level_for_points(new_points)
        profile.points = new_points
        profile.level = new_level
        self.record(user_id, delta, action, description)

        logger.info("Awarded %+d (%s) to user %s -> %s pts, level %s", delta, action, user_id, new_points, new_level)
        return {"new_points": new_points, "new_level": new_level}

    def history(self, user_id: int, limit: int = 50) -> List[PointTransaction]:
        """Most recent ledger rows for a user."""
        return list(self.db.scalars(
            select(PointTransaction)
            .where(PointTransaction.user_id == user_id)
            .order_by(PointTransaction.id.desc())
            .limit(limit)
        ))
