"""
Content store: posts, comments and one level of comment replies.

Creating content awards the author points through the ledger in the same
transaction. Adding a comment bumps posts.comments; replies touch no
counter at all.
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from model.profiles.profile import UserProfile
from model.social.enum import MediaPurpose, PostType
from model.social.models import Comment, CommentReply, Like, Post
from src.storage import StorageBackend
from src.utils import row_to_dict
from .errors import InvalidArgument, NotFound
from .graph import FollowManager
from .identity import Caller
from .media import MediaRegistry
from .mentions import mentioned_names
from .points import COMMENT_POINTS, REPLY_POINTS, PointsLedger, points_for_post
from .profiles import serialize_profile

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
SEARCH_LIMIT = 5


def _clean_content(content: Optional[str]) -> str:
    if content is None or not content.strip():
        raise InvalidArgument("Content is required")
    return content


def _mentions(mentioned_users: Optional[Sequence[int]]) -> List[int]:
    return [int(u) for u in (mentioned_users or [])]


class ContentManager:
    def __init__(self, db: Session, storage: Optional[StorageBackend] = None):
        self.db = db
        self.storage = storage
        self.ledger = PointsLedger(db)
        self.graph = FollowManager(db, storage)
        self.media = MediaRegistry(db, storage)

    def _require_post(self, post_id: int) -> Post:
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFound("Post not found")
        return post

    def _require_comment(self, comment_id: int) -> Comment:
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFound("Comment not found")
        return comment

    def _resolve_mentions(self, content: str, mentioned_users: Optional[Sequence[int]]) -> List[int]:
        """
        Explicit ids plus users whose display name, spaces removed, matches an
        @name in the text (case-insensitive). Order kept, duplicates dropped.
        """
        ids = _mentions(mentioned_users)
        names = {name.lower() for name in mentioned_names(content or "")}
        if names:
            squashed = func.lower(func.replace(UserProfile.display_name, " ", ""))
            ids.extend(self.db.scalars(
                select(UserProfile.user_id).where(squashed.in_(names)).order_by(UserProfile.id.asc())
            ))
        return list(dict.fromkeys(int(i) for i in ids))

    def _url(self, storage_id: Optional[str]) -> Optional[str]:
        if not storage_id or self.storage is None:
            return None
        return self.storage.get_url(storage_id)

    def _author(self, user_id: int, cache: Dict[int, Dict[str, Any]]) -> Dict[str, Any]:
        """Display name and profile for an author, memoized for one read."""
        if user_id not in cache:
            profile = self.db.scalar(select(UserProfile).where(UserProfile.user_id == user_id))
            cache[user_id] = {
                "author": profile.display_name if profile else "Unknown",
                "author_profile": serialize_profile(profile, self.storage) if profile else None,
            }
        return cache[user_id]

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------
    def generate_upload_url(self, caller: Caller) -> tuple[str, str]:
        return self.media.reserve(caller, MediaPurpose.post_photo)

    def create_post(
        self,
        caller: Caller,
        content: str,
        type: str,
        tags: Optional[Sequence[str]] = None,
        photo_id: Optional[str] = None,
    ) -> Post:
        try:
            post_type = PostType(type)
        except ValueError:
            raise InvalidArgument(f"Unknown post type: {type}")
        if photo_id is not None:
            self.media.require_attachable(caller, photo_id, MediaPurpose.post_photo)

        post = Post(
            author_id=caller.user_id,
            content=_clean_content(content),
            type=post_type.value,
            tags=list(tags or []),
            photo_id=photo_id,
            likes=0,
            comments=0,
            shares=0,
        )
        self.db.add(post)
        self.ledger.award(
            caller.user_id,
            points_for_post(post_type.value),
            "post",
            f"Posted a {post_type.value} 📝",
            required=False,
        )
        self.db.commit()
        logger.info("User %s created %s post %s", caller.user_id, post_type.value, post.id)
        return post

    def list_recent_posts(self, viewer: Optional[Caller], limit: int = 20) -> List[Dict[str, Any]]:
        """Newest posts first, each joined with author, photo URLs and follower count."""
        posts = self.db.scalars(select(Post).order_by(Post.id.desc()).limit(limit)).all()

        liked_ids = set()
        if viewer is not None and posts:
            liked_ids = set(self.db.scalars(
                select(Like.post_id).where(
                    Like.user_id == viewer.user_id,
                    Like.post_id.in_([p.id for p in posts]),
                )
            ))

        authors: Dict[int, Dict[str, Any]] = {}
        follower_counts: Dict[int, int] = {}
        out = []
        for post in posts:
            if post.author_id not in follower_counts:
                follower_counts[post.author_id] = self.graph.follower_count(post.author_id)
            data = row_to_dict(post)
            data["tags"] = list(post.tags or [])
            data.update(self._author(post.author_id, authors))
            data.update(
                post_photo_url=self._url(post.photo_id),
                author_follower_count=follower_counts[post.author_id],
                is_own_post=viewer is not None and viewer.user_id == post.author_id,
                has_liked=post.id in liked_ids,
            )
            out.append(data)
        return out

    # ------------------------------------------------------------------
    # Comments and replies
    # ------------------------------------------------------------------
    def add_comment(
        self,
        caller: Caller,
        post_id: int,
        content: str,
        mentioned_users: Optional[Sequence[int]] = None,
    ) -> Comment:
        post = self._require_post(post_id)
        comment = Comment(
            post_id=post.id,
            author_id=caller.user_id,
            content=_clean_content(content),
            likes=0,
            mentioned_users=self._resolve_mentions(content, mentioned_users),
        )
        self.db.add(comment)
        post.comments = post.comments + 1
        self.ledger.award(caller.user_id, COMMENT_POINTS, "comment", "Added a comment 💬", required=False)
        self.db.commit()
        logger.info("User %s commented on post %s", caller.user_id, post.id)
        return comment

    def add_comment_reply(
        self,
        caller: Caller,
        comment_id: int,
        content: str,
        mentioned_users: Optional[Sequence[int]] = None,
    ) -> CommentReply:
        comment = self._require_comment(comment_id)
        reply = CommentReply(
            comment_id=comment.id,
            author_id=caller.user_id,
            content=_clean_content(content),
            mentioned_users=self._resolve_mentions(content, mentioned_users),
        )
        self.db.add(reply)
        self.ledger.award(caller.user_id, REPLY_POINTS, "reply", "Replied to a comment 💬", required=False)
        self.db.commit()
        logger.info("User %s replied to comment %s", caller.user_id, comment.id)
        return reply

    def list_comments_for_post(self, viewer: Optional[Caller], post_id: int) -> List[Dict[str, Any]]:
        """Comments oldest first, each with the viewer's like status and its replies (oldest first)."""
        self._require_post(post_id)
        comments = self.db.scalars(
            select(Comment).where(Comment.post_id == post_id).order_by(Comment.id.asc())
        ).all()
        if not comments:
            return []

        comment_ids = [c.id for c in comments]
        liked_ids = set()
        if viewer is not None:
            liked_ids = set(self.db.scalars(
                select(Like.comment_id).where(
                    Like.user_id == viewer.user_id,
                    Like.comment_id.in_(comment_ids),
                )
            ))

        replies_by_comment: Dict[int, List[CommentReply]] = {cid: [] for cid in comment_ids}
        for reply in self.db.scalars(
            select(CommentReply)
            .where(CommentReply.comment_id.in_(comment_ids))
            .order_by(CommentReply.id.asc())
        ):
            replies_by_comment[reply.comment_id].append(reply)

        authors: Dict[int, Dict[str, Any]] = {}
        out = []
        for comment in comments:
            data = row_to_dict(comment)
            data["mentioned_users"] = list(comment.mentioned_users or [])
            data.update(self._author(comment.author_id, authors))
            data["has_liked"] = comment.id in liked_ids

            replies = []
            for reply in replies_by_comment[comment.id]:
                reply_data = row_to_dict(reply)
                reply_data["mentioned_users"] = list(reply.mentioned_users or [])
                reply_data.update(self._author(reply.author_id, authors))
                replies.append(reply_data)
            data["replies"] = replies
            out.append(data)
        return out

    # ------------------------------------------------------------------
    # Mention autocomplete
    # ------------------------------------------------------------------
    def search_users_by_name(self, query: str) -> List[Dict[str, Any]]:
        """Case-insensitive substring match on display names, at most five."""
        if query is None or len(query) < MIN_SEARCH_LENGTH:
            return []
        needle = query.lower()
        matches = []
        for profile in self.db.scalars(select(UserProfile).order_by(UserProfile.id.asc())):
            if needle in profile.display_name.lower():
                matches.append(serialize_profile(profile, self.storage))
                if len(matches) >= SEARCH_LIMIT:
                    break
        return matches
