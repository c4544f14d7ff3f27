# model/followers.py
"""
Follow edges between users.

Example:
    - User A (id=1) follows User B (id=2)
      -> follower_id=1, following_id=2
"""

from sqlalchemy import Column, TIMESTAMP, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.sql import func

from model.base import Base, IdType


class Follow(Base):
    __tablename__ = "follows"

    id = Column(IdType, primary_key=True, autoincrement=True)

    follower_id = Column(
        IdType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who is following"
    )

    following_id = Column(
        IdType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User being followed"
    )

    created_at = Column(
        TIMESTAMP,
        server_default=func.current_timestamp(),
        nullable=False
    )

    __table_args__ = (
        # A user can only follow another user once; also serves the composite lookup
        UniqueConstraint(
            'follower_id',
            'following_id',
            name='uq_follower_following'
        ),
        CheckConstraint(
            'follower_id != following_id',
            name='ck_no_self_follow'
        ),
    )

    def __repr__(self):
        return f"<Follow(id={self.id}, follower={self.follower_id}, following={self.following_id})>"
