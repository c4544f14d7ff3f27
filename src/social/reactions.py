"""
Reaction store: likes on posts and comments.

Liking is a toggle. A new like bumps the target's counter and rewards the
target's author (never the liker); removing a like decrements the counter,
floored at zero. The like row, counter, author points and ledger row are
committed together.
"""
import logging
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from model.social.enum import LikeType
from model.social.models import Comment, Like, Post
from .errors import NotFound
from .identity import Caller
from .points import LIKE_RECEIVED_POINTS, PointsLedger

logger = logging.getLogger(__name__)

Target = Union[Post, Comment]

# like type -> (model, Like column, ledger action, ledger description)
_TARGETS = {
    LikeType.post: (Post, Like.post_id, "like_received", "Someone liked your post! ❤️"),
    LikeType.comment: (Comment, Like.comment_id, "comment_like_received", "Someone liked your comment! ❤️"),
}


class ReactionManager:
    def __init__(self, db: Session):
        self.db = db
        self.ledger = PointsLedger(db)

    def _require_target(self, like_type: LikeType, target_id: int) -> Target:
        model = _TARGETS[like_type][0]
        target = self.db.get(model, target_id)
        if target is None:
            raise NotFound(f"{like_type.value.capitalize()} not found")
        return target

    def _find_like(self, user_id: int, like_type: LikeType, target_id: int) -> Optional[Like]:
        column = _TARGETS[like_type][1]
        return self.db.scalar(select(Like).where(Like.user_id == user_id, column == target_id))

    def _remove(self, like: Like, target: Target) -> None:
        self.db.delete(like)
        target.likes = max(0, target.likes - 1)
        self.db.commit()

    def _add(self, caller: Caller, like_type: LikeType, target: Target) -> None:
        _, _, action, description = _TARGETS[like_type]
        like = Like(user_id=caller.user_id, type=like_type.value)
        if like_type is LikeType.post:
            like.post_id = target.id
        else:
            like.comment_id = target.id
        self.db.add(like)
        target.likes = target.likes + 1
        self.ledger.award(target.author_id, LIKE_RECEIVED_POINTS, action, description, required=False)
        self.db.commit()

    def _toggle(self, caller: Caller, like_type: LikeType, target_id: int) -> bool:
        target = self._require_target(like_type, target_id)
        existing = self._find_like(caller.user_id, like_type, target_id)
        if existing is not None:
            self._remove(existing, target)
            logger.info("User %s unliked %s %s", caller.user_id, like_type, target_id)
            return False

        try:
            self._add(caller, like_type, target)
        except IntegrityError:
            # A concurrent request already inserted this like; nothing of ours was applied
            self.db.rollback()
            logger.warning("Duplicate like by user %s on %s %s", caller.user_id, like_type, target_id)
        else:
            logger.info("User %s liked %s %s", caller.user_id, like_type, target_id)
        return True

    def _unlike(self, caller: Caller, like_type: LikeType, target_id: int) -> bool:
        target = self._require_target(like_type, target_id)
        existing = self._find_like(caller.user_id, like_type, target_id)
        if existing is None:
            return False
        self._remove(existing, target)
        logger.info("User %s unliked %s %s", caller.user_id, like_type, target_id)
        return True

    def toggle_post_like(self, caller: Caller, post_id: int) -> bool:
        """True when the post is now liked by the caller, False when the like was removed."""
        return self._toggle(caller, LikeType.post, post_id)

    def toggle_comment_like(self, caller: Caller, comment_id: int) -> bool:
        return self._toggle(caller, LikeType.comment, comment_id)

    def unlike_post(self, caller: Caller, post_id: int) -> bool:
        """Remove the caller's like. False (and no counter change) when there was none."""
        return self._unlike(caller, LikeType.post, post_id)

    def unlike_comment(self, caller: Caller, comment_id: int) -> bool:
        return self._unlike(caller, LikeType.comment, comment_id)
