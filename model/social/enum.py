# social/enum.py
from enum import StrEnum


class ProfileRole(StrEnum):
    shopper = "shopper"
    business = "business"
    delivery_driver = "delivery_driver"


class PostType(StrEnum):
    verse = "verse"
    prayer = "prayer"
    testimony = "testimony"
    general = "general"


class LikeType(StrEnum):
    post = "post"
    comment = "comment"


class MediaPurpose(StrEnum):
    profile_photo = "profile_photo"
    post_photo = "post_photo"
