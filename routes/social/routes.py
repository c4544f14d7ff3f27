from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import require_caller, get_caller_optional
from schema.profile import ProfileOut, UploadUrlOut
from schema.social import (
    PostCreate, PostOut, PostFeedItem,
    CommentCreate, CommentOut, ReplyOut, CommentThreadItem,
    LikeToggleOut, UnlikeOut,
)
from src.social import Caller, ContentManager, ReactionManager
from src.storage import StorageBackend, get_storage_backend

router = APIRouter(
    prefix="/v1/social",
    tags=["Social"],
)


def get_content_manager(
    db: Session = Depends(get_db), storage: StorageBackend = Depends(get_storage_backend)
) -> ContentManager:
    return ContentManager(db, storage)


def get_reaction_manager(db: Session = Depends(get_db)) -> ReactionManager:
    return ReactionManager(db)


# --------------------------
# Posts
# --------------------------

@router.post("/posts", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreate,
    caller: Caller = Depends(require_caller),
    content: ContentManager = Depends(get_content_manager),
):
    """Create a new post. The author earns points by post type."""
    return content.create_post(caller, payload.content, payload.type, payload.tags, payload.photo_id)


@router.get("/posts", response_model=List[PostFeedItem])
def list_posts(
    limit: int = Query(20, ge=1, le=100),
    viewer: Optional[Caller] = Depends(get_caller_optional),
    content: ContentManager = Depends(get_content_manager),
):
    """List recent posts, newest first."""
    return content.list_recent_posts(viewer, limit)


@router.post("/posts/upload-url", response_model=UploadUrlOut)
def generate_post_photo_upload_url(
    caller: Caller = Depends(require_caller),
    content: ContentManager = Depends(get_content_manager),
):
    storage_id, url = content.generate_upload_url(caller)
    return {"storage_id": storage_id, "upload_url": url}


# --------------------------
# Comments
# --------------------------

@router.post("/posts/{post_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    post_id: int,
    payload: CommentCreate,
    caller: Caller = Depends(require_caller),
    content: ContentManager = Depends(get_content_manager),
):
    """Comment on a post."""
    return content.add_comment(caller, post_id, payload.content, payload.mentioned_users)


@router.get("/posts/{post_id}/comments", response_model=List[CommentThreadItem])
def list_comments(
    post_id: int,
    viewer: Optional[Caller] = Depends(get_caller_optional),
    content: ContentManager = Depends(get_content_manager),
):
    """All comments on a post with their replies, oldest first."""
    return content.list_comments_for_post(viewer, post_id)


@router.post("/comments/{comment_id}/replies", response_model=ReplyOut, status_code=status.HTTP_201_CREATED)
def create_reply(
    comment_id: int,
    payload: CommentCreate,
    caller: Caller = Depends(require_caller),
    content: ContentManager = Depends(get_content_manager),
):
    """Reply to a comment."""
    return content.add_comment_reply(caller, comment_id, payload.content, payload.mentioned_users)


# --------------------------
# Likes
# --------------------------

@router.post("/posts/{post_id}/like", response_model=LikeToggleOut)
def like_post(
    post_id: int,
    caller: Caller = Depends(require_caller),
    reactions: ReactionManager = Depends(get_reaction_manager),
):
    """Like or unlike a post."""
    return {"liked": reactions.toggle_post_like(caller, post_id)}


@router.delete("/posts/{post_id}/like", response_model=UnlikeOut)
def unlike_post(
    post_id: int,
    caller: Caller = Depends(require_caller),
    reactions: ReactionManager = Depends(get_reaction_manager),
):
    return {"removed": reactions.unlike_post(caller, post_id)}


@router.post("/comments/{comment_id}/like", response_model=LikeToggleOut)
def like_comment(
    comment_id: int,
    caller: Caller = Depends(require_caller),
    reactions: ReactionManager = Depends(get_reaction_manager),
):
    """Like or unlike a comment."""
    return {"liked": reactions.toggle_comment_like(caller, comment_id)}


@router.delete("/comments/{comment_id}/like", response_model=UnlikeOut)
def unlike_comment(
    comment_id: int,
    caller: Caller = Depends(require_caller),
    reactions: ReactionManager = Depends(get_reaction_manager),
):
    return {"removed": reactions.unlike_comment(caller, comment_id)}


# --------------------------
# Mention autocomplete
# --------------------------

@router.get("/users/search", response_model=List[ProfileOut])
def search_users(
    q: str = Query(""),
    content: ContentManager = Depends(get_content_manager),
):
    return content.search_users_by_name(q)
