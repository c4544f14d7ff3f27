# routes/followers.py
"""
API endpoints for follow/unfollow functionality.
Lets users follow each other and view follower/following lists.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config.db import get_db
from config.security import require_caller, get_caller_optional
from schema.social import FollowToggleOut, FollowerOut, FollowStatsOut
from src.social import Caller, FollowManager
from src.storage import StorageBackend, get_storage_backend

router = APIRouter(prefix="/v1/followers", tags=["Followers"])


def get_follow_manager(
    db: Session = Depends(get_db), storage: StorageBackend = Depends(get_storage_backend)
) -> FollowManager:
    return FollowManager(db, storage)


# ============================================================================
# Follow/Unfollow Endpoints
# ============================================================================

@router.post("/{user_id}/follow", response_model=FollowToggleOut)
def follow_user(
    user_id: int,
    caller: Caller = Depends(require_caller),
    graph: FollowManager = Depends(get_follow_manager),
):
    """
    Follow a user.

    - **user_id**: ID of user to follow
    - `changed` is false when the caller already follows them
    """
    changed = graph.follow(caller, user_id)
    return FollowToggleOut(changed=changed, followers_count=graph.follower_count(user_id))


@router.delete("/{user_id}/follow", response_model=FollowToggleOut)
def unfollow_user(
    user_id: int,
    caller: Caller = Depends(require_caller),
    graph: FollowManager = Depends(get_follow_manager),
):
    """
    Unfollow a user.

    - `changed` is false when the caller wasn't following them
    """
    changed = graph.unfollow(caller, user_id)
    return FollowToggleOut(changed=changed, followers_count=graph.follower_count(user_id))


# ============================================================================
# Query Endpoints
# ============================================================================

@router.get("/{user_id}/followers", response_model=List[FollowerOut])
def get_followers(
    user_id: int,
    limit: int = Query(50, ge=1, le=100),
    graph: FollowManager = Depends(get_follow_manager),
):
    return graph.list_followers(user_id, limit)


@router.get("/{user_id}/following", response_model=List[FollowerOut])
def get_following(
    user_id: int,
    limit: int = Query(50, ge=1, le=100),
    graph: FollowManager = Depends(get_follow_manager),
):
    return graph.list_following(user_id, limit)


@router.get("/{user_id}/stats", response_model=FollowStatsOut)
def get_follow_stats(
    user_id: int,
    viewer: Optional[Caller] = Depends(get_caller_optional),
    graph: FollowManager = Depends(get_follow_manager),
):
    """
    Follower/following counts for a user, and whether the viewer follows them
    (false when signed out).
    """
    counts = graph.follow_counts(user_id)
    return FollowStatsOut(
        user_id=user_id,
        followers_count=counts["followers"],
        following_count=counts["following"],
        is_following=graph.is_following(viewer, user_id),
    )
