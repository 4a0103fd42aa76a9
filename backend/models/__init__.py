"""Plain model classes built from database rows."""

from models.user import User
from models.feed import Feed, VALID_STATUSES
from models.meta import Meta, META_TYPES
from models.comment import Comment
from models.friend import Friend

__all__ = [
    'User',
    'Feed',
    'VALID_STATUSES',
    'Meta',
    'META_TYPES',
    'Comment',
    'Friend'
]
