"""
Social graph and gamification core.

Managers take a SQLAlchemy session (and the media storage backend where
they resolve photo URLs) and an explicit Caller for the acting user.
"""
from .errors import SocialError, Unauthenticated, NotFound, AlreadyExists, InvalidArgument
from .identity import IdentityClaims, Caller, ensure_user, resolve_caller_user_id, resolve_caller, require_caller
from .points import PointsLedger, level_for_points, points_for_post
from .graph import FollowManager
from .profiles import ProfileManager, serialize_profile
from .content import ContentManager
from .reactions import ReactionManager
from .media import MediaRegistry

__all__ = [
    'SocialError',
    'Unauthenticated',
    'NotFound',
    'AlreadyExists',
    'InvalidArgument',
    'IdentityClaims',
    'Caller',
    'ensure_user',
    'resolve_caller_user_id',
    'resolve_caller',
    'require_caller',
    'PointsLedger',
    'level_for_points',
    'points_for_post',
    'FollowManager',
    'ProfileManager',
    'serialize_profile',
    'ContentManager',
    'ReactionManager',
    'MediaRegistry',
]
