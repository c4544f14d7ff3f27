# social/models.py
from __future__ import annotations

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    JSON,
    TIMESTAMP,
    ForeignKey,
    Index,
    UniqueConstraint,
    CheckConstraint,
    Enum as SAEnum,
)
from sqlalchemy.sql import func

from model.base import Base, IdType

PostTypeEnum = SAEnum("verse", "prayer", "testimony", "general", name="post_type_enum")
LikeTypeEnum = SAEnum("post", "comment", name="like_type_enum")


# ---------------------------------------------------------------------------
# Posts: likes/comments/shares are denormalized counters, only ever changed
# by the reaction and comment operations.
# ---------------------------------------------------------------------------
class Post(Base):
    __tablename__ = "posts"

    id = Column(IdType, primary_key=True, autoincrement=True)
    author_id = Column(IdType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    type = Column(PostTypeEnum, nullable=False)
    likes = Column(Integer, nullable=False, default=0)
    comments = Column(Integer, nullable=False, default=0)
    shares = Column(Integer, nullable=False, default=0)
    tags = Column(JSON, nullable=False, default=list)
    photo_id = Column(String(255), nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        Index("idx_posts_author", "author_id", "created_at"),
    )


# ---------------------------------------------------------------------------
# Comments on posts. Adding one bumps posts.comments.
# ---------------------------------------------------------------------------
class Comment(Base):
    __tablename__ = "comments"

    id = Column(IdType, primary_key=True, autoincrement=True)
    post_id = Column(IdType, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(IdType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    likes = Column(Integer, nullable=False, default=0)
    mentioned_users = Column(JSON, nullable=False, default=list)
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        Index("idx_comments_post", "post_id", "created_at"),
    )


# ---------------------------------------------------------------------------
# Replies: one level under a comment. No counters of their own and they
# don't touch the parent comment or post.
# ---------------------------------------------------------------------------
class CommentReply(Base):
    __tablename__ = "comment_replies"

    id = Column(IdType, primary_key=True, autoincrement=True)
    comment_id = Column(IdType, ForeignKey("comments.id", ondelete="CASCADE"), nullable=False)
    author_id = Column(IdType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    mentioned_users = Column(JSON, nullable=False, default=list)
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.current_timestamp())

    __table_args__ = (
        Index("idx_comment_replies_comment", "comment_id", "created_at"),
    )


# ---------------------------------------------------------------------------
# Likes: user → (post|comment). Exactly one target column is set and `type`
# names it. One like per (user, target).
# ---------------------------------------------------------------------------
class Like(Base):
    __tablename__ = "likes"

    id = Column(IdType, primary_key=True, autoincrement=True)
    user_id = Column(IdType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(IdType, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True)
    comment_id = Column(IdType, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    type = Column(LikeTypeEnum, nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.current_timestamp(), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_likes_user_post"),
        UniqueConstraint("user_id", "comment_id", name="uq_likes_user_comment"),
        CheckConstraint(
            "(type = 'post' AND post_id IS NOT NULL AND comment_id IS NULL)"
            " OR (type = 'comment' AND comment_id IS NOT NULL AND post_id IS NULL)",
            name="ck_likes_single_target",
        ),
    )
