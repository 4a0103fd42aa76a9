import logging
from typing import Any, Dict, Optional

from db import get_connection
from models import Feed, VALID_STATUSES
from models.timestamps import to_iso
from services.cache_service import clear_feed_cache, get_cache
from services.config_service import client_config
from services.errors import ServiceError
from services.feed_views import render_feed_detail, render_feeds
from services.meta_service import bind_metas_to_post
from utils.pagination import empty_page, normalize_page, paginate_list
from utils.timestamps import now_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

LISTING_ORDER = 'ORDER BY top DESC, created_at DESC, id DESC'


class FeedError(ServiceError):
    """Raised for feed validation, permission and lookup failures"""


def normalize_status(status: Optional[str]) -> str:
    return status if status in VALID_STATUSES else 'publish'


def _timestamp_or_error(value):
    try:
        return parse_timestamp(value)
    except (TypeError, ValueError, OverflowError, OSError):
        raise FeedError(f'Invalid date: {value}', 400)


def _is_numeric(key) -> bool:
    # str.isdigit alone accepts superscripts and other non-ASCII digits
    return key.isascii() and key.isdigit()


def _detail_cache_key(key):
    if _is_numeric(key) and key != str(int(key)):
        return None
    return f'feed_{key}'


def _meta_names(value, field):
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(name, str) for name in value):
        raise FeedError(f'{field} must be a list of names', 400)
    return value


class FeedService:
    """Posts and pages: listing, detail, search and mutations.

    Callers pass the requester as (uid, admin); uid is None for anonymous
    requests.
    """

    def __init__(self, cache=None):
        self.cache = cache or get_cache()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_feeds(self, page=None, limit=None, feed_type=None, admin=False) -> Dict[str, Any]:
        """One page of feeds, pinned first, then newest first.

        Only the published listing is cached; draft and private listings
        are admin-only and always read through to the database.
        """
        if feed_type in ('draft', 'private'):
            if not admin:
                raise FeedError('Permission denied', 403)
            status = feed_type
        else:
            status = 'publish'

        page_index, limit_num = normalize_page(page, limit)

        if status != 'publish':
            return self._query_listing(status, page_index, limit_num, admin=True)

        cache_key = f'feeds_{status}_{page_index}_{limit_num}'
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        # Published listings are always rendered in the public shape so the
        # shared cache entry carries no admin-only columns
        data = self._query_listing(status, page_index, limit_num, admin=False)
        self.cache.set(cache_key, data)
        return data

    def _query_listing(self, status, page_index, limit_num, admin):
        if status == 'publish':
            where, params = 'status = %s AND property = %s', ('publish', 'post')
        else:
            where, params = 'status = %s', (status,)

        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute(f'SELECT COUNT(*) AS count FROM feeds WHERE {where}', params)
            size = cur.fetchone()['count']
            if size == 0:
                return empty_page()

            # One extra row tells whether a next page exists
            cur.execute(
                f'SELECT * FROM feeds WHERE {where} {LISTING_ORDER} LIMIT %s OFFSET %s',
                params + (limit_num + 1, page_index * limit_num)
            )
            rows = cur.fetchall()

            has_next = len(rows) == limit_num + 1
            if has_next:
                rows = rows[:limit_num]

            feeds = render_feeds(cur, rows, admin=admin)

        return {'size': size, 'data': feeds, 'hasNext': has_next}

    def get_feed(self, key: str, uid=None, admin=False) -> Dict[str, Any]:
        """A single feed by numeric id or alias, cached under feed_<key>.

        Zero-padded ids such as '007' are read straight from the database;
        only the spellings that invalidation deletes are ever cached.
        """
        cache_key = _detail_cache_key(key)
        if cache_key is None:
            feed = self._query_detail(key)
        else:
            feed = self.cache.get_or_set(cache_key, lambda: self._query_detail(key))
        if not feed:
            raise FeedError('Not found', 404)

        if feed['status'] != 'publish' and feed['uid'] != uid and not admin:
            raise FeedError('Permission denied', 403)

        feed = dict(feed)
        if client_config().get_or_default('counter.enabled', False):
            with get_connection() as conn:
                cur = conn.cursor()
                cur.execute('UPDATE feeds SET views = views + 1 WHERE id = %s', (feed['id'],))
            if cache_key is not None:
                self.cache.delete(cache_key)
            feed['views'] = (feed['views'] or 0) + 1
        return feed

    def _query_detail(self, key):
        with get_connection() as conn:
            cur = conn.cursor()
            if _is_numeric(key):
                cur.execute(
                    'SELECT * FROM feeds WHERE id = %s OR alias = %s ORDER BY id ASC LIMIT 1',
                    (int(key), str(key))
                )
            else:
                cur.execute('SELECT * FROM feeds WHERE alias = %s ORDER BY id ASC LIMIT 1', (key,))
            row = cur.fetchone()
            if not row:
                return None
            return render_feed_detail(cur, row)

    def timeline(self):
        """Every published post, newest first, without bodies"""
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                '''SELECT id, title, alias, created_at FROM feeds
                   WHERE status = %s AND property = %s
                   ORDER BY created_at DESC, updated_at DESC, id DESC''',
                ('publish', 'post')
            )
            rows = cur.fetchall()
        return [
            {
                'id': row['id'],
                'title': row['title'],
                'alias': row['alias'],
                'created_at': to_iso(row['created_at']),
            }
            for row in rows
        ]

    def search(self, keyword: Optional[str], page=None, limit=None, admin=False) -> Dict[str, Any]:
        """Substring search over title, content, summary and alias.

        The public result list is cached per keyword and paged in memory;
        admins also see drafts and private feeds and bypass the cache.
        """
        page_index, limit_num = normalize_page(page, limit)
        if keyword is None or not keyword.strip():
            return empty_page()

        if admin:
            items = self._query_search(keyword, admin=True)
        else:
            items = self.cache.get_or_set(f'search_{keyword}', lambda: self._query_search(keyword, admin=False))
        return paginate_list(items, page_index, limit_num)

    def _query_search(self, keyword, admin):
        pattern = f'%{keyword}%'
        status_filter = '' if admin else 'AND status = %s'
        params = (pattern, pattern, pattern, pattern) + (() if admin else ('publish',))
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                f'''SELECT * FROM feeds
                    WHERE (title LIKE %s OR content LIKE %s OR summary LIKE %s OR alias LIKE %s)
                    {status_filter}
                    ORDER BY created_at DESC, updated_at DESC, id DESC''',
                params
            )
            return render_feeds(cur, cur.fetchall(), admin=admin)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _get_owned_feed(self, cur, feed_id, uid, admin) -> Feed:
        cur.execute('SELECT * FROM feeds WHERE id = %s', (feed_id,))
        feed_data = cur.fetchone()
        if not feed_data:
            raise FeedError('Not found', 404)
        feed = Feed(**feed_data)
        if feed.uid != uid and not admin:
            raise FeedError('Permission denied', 403)
        return feed

    def create_feed(self, data: Dict[str, Any], uid=None, admin=False) -> Dict[str, int]:
        if not admin:
            raise FeedError('Permission denied', 403)

        title = data.get('title')
        content = data.get('content')
        if not title:
            raise FeedError('Title is required', 400)
        if not content:
            raise FeedError('Content is required', 400)

        alias = data.get('alias') or None
        created_at = _timestamp_or_error(data.get('created_at')) or now_timestamp()
        updated_at = _timestamp_or_error(data.get('updated_at')) or created_at
        tags = _meta_names(data.get('tags'), 'tags') or []
        categories = _meta_names(data.get('categories'), 'categories') or []

        with get_connection() as conn:
            cur = conn.cursor()

            cur.execute('SELECT id FROM feeds WHERE title = %s OR content = %s LIMIT 1', (title, content))
            if cur.fetchone():
                raise FeedError('Content already exists', 400)

            cur.execute(
                '''INSERT INTO feeds (title, content, summary, uid, alias, created_at, updated_at,
                                      status, property, allow_comment)
                   VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s) RETURNING id''',
                (title, content, data.get('summary') or '', uid, alias, created_at, updated_at,
                 normalize_status(data.get('status')), data.get('property') or 'post',
                 1 if data.get('allow_comment', True) else 0)
            )
            result = cur.fetchone()
            if not result:
                raise FeedError('Failed to insert', 500)
            feed_id = result['id']

            if tags:
                bind_metas_to_post(cur, feed_id, tags, 'tag')
            if categories:
                bind_metas_to_post(cur, feed_id, categories, 'category')

        clear_feed_cache(feed_id, None, alias)
        logger.info("Feed %s created by user %s", feed_id, uid)
        return {'insertedId': feed_id}

    def update_feed(self, feed_id: int, data: Dict[str, Any], uid=None, admin=False) -> None:
        """Apply a partial update; fields missing from data keep their value"""
        fields = {}
        for column in ('title', 'content', 'summary'):
            if data.get(column) is not None:
                fields[column] = data[column]
        if 'alias' in data:
            fields['alias'] = data['alias'] or None
        if data.get('top') is not None:
            fields['top'] = self._parse_top(data['top'])
        if data.get('status') is not None:
            fields['status'] = normalize_status(data['status'])
        if 'property' in data:
            fields['property'] = data['property'] or 'post'
        if data.get('allow_comment') is not None:
            fields['allow_comment'] = 1 if data['allow_comment'] else 0
        if data.get('created_at'):
            fields['created_at'] = _timestamp_or_error(data['created_at'])
        fields['updated_at'] = _timestamp_or_error(data.get('updated_at')) or now_timestamp()
        tags = _meta_names(data.get('tags'), 'tags')
        categories = _meta_names(data.get('categories'), 'categories')

        with get_connection() as conn:
            cur = conn.cursor()
            feed = self._get_owned_feed(cur, feed_id, uid, admin)

            assignments = ', '.join(f'{column} = %s' for column in fields)
            cur.execute(
                f'UPDATE feeds SET {assignments} WHERE id = %s',
                tuple(fields.values()) + (feed_id,)
            )

            if tags is not None:
                bind_metas_to_post(cur, feed_id, tags, 'tag')
            if categories is not None:
                bind_metas_to_post(cur, feed_id, categories, 'category')

        clear_feed_cache(feed_id, feed.alias, fields.get('alias', feed.alias))
        logger.info("Feed %s updated by user %s", feed_id, uid)

    def set_top(self, feed_id: int, top, uid=None, admin=False) -> None:
        top = self._parse_top(top)
        with get_connection() as conn:
            cur = conn.cursor()
            feed = self._get_owned_feed(cur, feed_id, uid, admin)
            cur.execute('UPDATE feeds SET top = %s WHERE id = %s', (top, feed_id))

        clear_feed_cache(feed_id, feed.alias, feed.alias)

    def delete_feed(self, feed_id: int, uid=None, admin=False) -> None:
        with get_connection() as conn:
            cur = conn.cursor()
            feed = self._get_owned_feed(cur, feed_id, uid, admin)
            cur.execute('DELETE FROM feeds WHERE id = %s', (feed_id,))

        clear_feed_cache(feed_id, feed.alias, None)
        logger.info("Feed %s deleted by user %s", feed_id, uid)

    @staticmethod
    def _parse_top(value) -> int:
        if isinstance(value, bool):
            raise FeedError('top must be an integer', 400)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise FeedError('top must be an integer', 400)
