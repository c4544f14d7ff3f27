# model/points.py
"""
Append-only ledger of point awards. Rows are never updated or deleted;
UserProfile.points is the running total and is written in the same transaction.
"""

from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey, Index
from sqlalchemy.sql import func

from model.base import Base, IdType


class PointTransaction(Base):
    __tablename__ = "point_transactions"

    id = Column(IdType, primary_key=True, autoincrement=True)
    user_id = Column(IdType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    points = Column(Integer, nullable=False, comment="Signed delta")
    action = Column(String(64), nullable=False)  # e.g. 'welcome','post','comment','like_received'
    description = Column(String(255), nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.current_timestamp(), nullable=False)

    __table_args__ = (
        Index("idx_point_transactions_user", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<PointTransaction(user_id={self.user_id}, points={self.points}, action={self.action!r})>"
