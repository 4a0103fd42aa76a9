import logging
from typing import Dict, List

from db import get_connection
from models import Comment
from services.errors import ServiceError
from services.feed_views import load_users

logger = logging.getLogger(__name__)


class CommentError(ServiceError):
    """Raised for comment validation, permission and lookup failures"""


class CommentService:
    """Comments attached to feeds"""

    def list_comments(self, feed_id: int) -> List[Dict]:
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('SELECT id FROM feeds WHERE id = %s', (feed_id,))
            if not cur.fetchone():
                raise CommentError('Feed not found', 404)

            cur.execute(
                'SELECT * FROM comments WHERE feed_id = %s ORDER BY created_at DESC, id DESC',
                (feed_id,)
            )
            comments = [Comment(**row) for row in cur.fetchall()]
            users = load_users(cur, [comment.user_id for comment in comments])

        result = []
        for comment in comments:
            data = comment.to_dict()
            data['user'] = users.get(comment.user_id)
            result.append(data)
        return result

    def create_comment(self, feed_id: int, user_id: int, content) -> Dict:
        if not content or not str(content).strip():
            raise CommentError('Content is required', 400)

        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('SELECT id, allow_comment FROM feeds WHERE id = %s', (feed_id,))
            feed = cur.fetchone()
            if not feed:
                raise CommentError('Feed not found', 404)
            if not feed['allow_comment']:
                raise CommentError('Comment not allowed', 403)

            cur.execute(
                'INSERT INTO comments (feed_id, user_id, content) VALUES (%s, %s, %s) RETURNING id',
                (feed_id, user_id, content)
            )
            comment_id = cur.fetchone()['id']

            cur.execute('SELECT * FROM comments WHERE id = %s', (comment_id,))
            comment = Comment(**cur.fetchone())

        logger.info("Comment %s added to feed %s by user %s", comment_id, feed_id, user_id)
        return comment.to_dict()

    def delete_comment(self, comment_id: int, uid: int, admin: bool = False) -> None:
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('SELECT * FROM comments WHERE id = %s', (comment_id,))
            comment_data = cur.fetchone()
            if not comment_data:
                raise CommentError('Not found', 404)
            if comment_data['user_id'] != uid and not admin:
                raise CommentError('Permission denied', 403)

            cur.execute('DELETE FROM comments WHERE id = %s', (comment_id,))
