from .errors import ServiceError
from .cache_service import CacheService, get_cache, clear_feed_cache
from .config_service import ConfigService, ConfigError
from .meta_service import MetaService, MetaError, bind_metas_to_post
from .feed_service import FeedService, FeedError
from .comment_service import CommentService, CommentError
from .friend_service import FriendService, FriendError
from .user_service import UserService, UserError

__all__ = [
    'ServiceError',
    'CacheService', 'get_cache', 'clear_feed_cache',
    'ConfigService', 'ConfigError',
    'MetaService', 'MetaError', 'bind_metas_to_post',
    'FeedService', 'FeedError',
    'CommentService', 'CommentError',
    'FriendService', 'FriendError',
    'UserService', 'UserError',
]
