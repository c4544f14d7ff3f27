from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from schema.profile import ProfileOut


PostTypeLiteral = Literal["verse", "prayer", "testimony", "general"]


# ------------------------------------------------------------
# Posts
# ------------------------------------------------------------
class PostCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)
    type: PostTypeLiteral
    tags: List[str] = Field(default_factory=list)
    photo_id: Optional[str] = None


class PostOut(BaseModel):
    id: int
    author_id: int
    content: str
    type: PostTypeLiteral
    likes: int = 0
    comments: int = 0
    shares: int = 0
    tags: List[str] = []
    photo_id: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PostFeedItem(PostOut):
    author: str
    author_profile: Optional[ProfileOut] = None
    author_follower_count: int = 0
    post_photo_url: Optional[str] = None
    is_own_post: bool = False
    has_liked: bool = False


# ------------------------------------------------------------
# Comments
# ------------------------------------------------------------
class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)
    mentioned_users: List[int] = Field(default_factory=list)


class CommentOut(BaseModel):
    id: int
    post_id: int
    author_id: int
    content: str
    likes: int = 0
    mentioned_users: List[int] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReplyOut(BaseModel):
    id: int
    comment_id: int
    author_id: int
    content: str
    mentioned_users: List[int] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReplyThreadItem(ReplyOut):
    author: str
    author_profile: Optional[ProfileOut] = None


class CommentThreadItem(CommentOut):
    author: str
    author_profile: Optional[ProfileOut] = None
    has_liked: bool = False
    replies: List[ReplyThreadItem] = []


# ------------------------------------------------------------
# Toggles
# ------------------------------------------------------------
class LikeToggleOut(BaseModel):
    liked: bool


class UnlikeOut(BaseModel):
    removed: bool


# ------------------------------------------------------------
# Follows
# ------------------------------------------------------------
class FollowToggleOut(BaseModel):
    changed: bool
    followers_count: int


class FollowerOut(BaseModel):
    user_id: int
    display_name: Optional[str] = None
    profile_photo_url: Optional[str] = None
    followed_at: datetime


class FollowStatsOut(BaseModel):
    user_id: int
    followers_count: int
    following_count: int
    is_following: bool


__all__ = [
    "PostCreate",
    "PostOut",
    "PostFeedItem",
    "CommentCreate",
    "CommentOut",
    "ReplyOut",
    "ReplyThreadItem",
    "CommentThreadItem",
    "LikeToggleOut",
    "UnlikeOut",
    "FollowToggleOut",
    "FollowerOut",
    "FollowStatsOut",
]
