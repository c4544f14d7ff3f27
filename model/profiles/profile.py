# model/profiles/profile.py
"""
Gamified community profile.
- One-to-one UserProfile per user (users.id), created explicitly after sign-in
- Common fields plus a role-specific bag (business / delivery driver / shopper);
  fields that don't apply to the profile's role are simply left NULL
"""

from sqlalchemy import (
    Column, String, Integer, Float, Text, JSON, TIMESTAMP, ForeignKey,
    Enum as SAEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from model.base import Base, IdType

# --------------------------- Enums (stable) ---------------------------------
ProfileRoleEnum = SAEnum("shopper", "business", "delivery_driver", name="profile_role_enum")


# ---------------------------- UserProfile -----------------------------------
class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(IdType, primary_key=True, autoincrement=True)
    # One-to-one with users.id (unique)
    user_id = Column(IdType, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)

    # Role is fixed at creation
    role = Column(ProfileRoleEnum, nullable=False)

    # Identity / display
    display_name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    profile_photo_id = Column(String(255), nullable=True)  # opaque media-store id

    # Gamification (level is always points // 1000 + 1)
    points = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)
    badges = Column(JSON, nullable=False, default=list)
    joined_at = Column(TIMESTAMP, nullable=False)

    # Common fields
    location = Column(String(255), nullable=True)
    website = Column(String(512), nullable=True)
    phone = Column(String(32), nullable=True)

    # Business specific
    business_name = Column(String(255), nullable=True)
    business_category = Column(String(120), nullable=True)
    business_hours = Column(String(255), nullable=True)
    business_services = Column(JSON, nullable=True)

    # Delivery driver specific
    vehicle_type = Column(String(120), nullable=True)
    delivery_radius = Column(Float, nullable=True)
    availability = Column(String(255), nullable=True)

    # Shopper specific
    interests = Column(JSON, nullable=True)
    favorite_verses = Column(JSON, nullable=True)

    created_at = Column(TIMESTAMP, server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(
        TIMESTAMP,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
        nullable=False,
    )

    user = relationship("Users", back_populates="profile", lazy="selectin")

    def __repr__(self):
        return f"<UserProfile(id={self.id}, user_id={self.user_id}, points={self.points}, level={self.level})>"
