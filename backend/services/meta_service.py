import logging
import re
from typing import Dict, List, Optional

from db import get_connection
from models import Meta, META_TYPES
from services.cache_service import get_cache
from services.errors import ServiceError
from services.feed_views import render_feeds

logger = logging.getLogger(__name__)

# CJK unified ideographs U+4E00..U+9FA5 are kept in aliases
ALIAS_STRIP = re.compile(r'[^a-z0-9一-龥-]')
WHITESPACE = re.compile(r'\s+')


class MetaError(ServiceError):
    """Raised when a tag/category cannot be resolved or created"""


def generate_alias(name: str) -> str:
    """URL-safe alias: lowercase, whitespace runs to '-', other symbols dropped"""
    alias = WHITESPACE.sub('-', name.lower())
    return ALIAS_STRIP.sub('', alias)


def get_meta_by_name(cur, name: str, meta_type: str) -> Optional[dict]:
    cur.execute('SELECT * FROM metas WHERE name = %s AND type = %s', (name, meta_type))
    return cur.fetchone()


def get_meta_id_or_create(cur, name: str, meta_type: str) -> int:
    """Resolve a meta by exact name and type, inserting it on a miss"""
    meta = get_meta_by_name(cur, name, meta_type)
    if meta:
        return meta['id']

    cur.execute(
        'INSERT INTO metas (name, type, alias) VALUES (%s, %s, %s) RETURNING id',
        (name, meta_type, generate_alias(name))
    )
    result = cur.fetchone()
    if not result:
        raise MetaError('Failed to insert meta', 500)
    logger.info("Created %s '%s' (id=%s)", meta_type, name, result['id'])
    return result['id']


def bind_metas_to_post(cur, feed_id: int, names: List[str], meta_type: str = 'tag') -> List[int]:
    """Make the feed's metas of one type exactly `names`.

    Existing join rows of that type are dropped and one row per distinct
    name is inserted, so repeating a call with the same names is a no-op
    in effect and earlier bindings never leak through.
    """
    if meta_type not in META_TYPES:
        raise MetaError(f'Unknown meta type: {meta_type}', 400)

    cur.execute('DELETE FROM feed_metas WHERE feed_id = %s AND type = %s', (feed_id, meta_type))

    meta_ids = []
    for name in names:
        meta_id = get_meta_id_or_create(cur, name, meta_type)
        if meta_id in meta_ids:
            continue
        cur.execute(
            'INSERT INTO feed_metas (feed_id, meta_id, type) VALUES (%s, %s, %s)',
            (feed_id, meta_id, meta_type)
        )
        meta_ids.append(meta_id)
    return meta_ids


class MetaService:
    """Read side of tags and categories"""

    def __init__(self, cache=None):
        self.cache = cache or get_cache()

    def list_metas(self, meta_type: Optional[str] = None) -> List[Dict]:
        """Every meta (optionally of one type) with the number of linked feeds"""
        cache_key = f'meta_list_{meta_type or "all"}'
        return self.cache.get_or_set(cache_key, lambda: self._query_metas(meta_type))

    def _query_metas(self, meta_type):
        query = '''SELECT m.*, COUNT(fm.feed_id) AS feeds
                   FROM metas m
                   LEFT JOIN feed_metas fm ON fm.meta_id = m.id
                   {where}
                   GROUP BY m.id, m.name, m.alias, m.type, m.description, m.parent, m.created_at, m.updated_at
                   ORDER BY m.id ASC'''
        with get_connection() as conn:
            cur = conn.cursor()
            if meta_type:
                cur.execute(query.format(where='WHERE m.type = %s'), (meta_type,))
            else:
                cur.execute(query.format(where=''))
            rows = cur.fetchall()

        metas = []
        for row in rows:
            feeds = row.pop('feeds')
            data = Meta(**row).to_dict()
            data['feeds'] = feeds
            metas.append(data)
        return metas

    def get_meta(self, name: str, admin: bool = False) -> Dict:
        """A meta by alias or name, with the feeds linked to it.

        Non-admins only see published feeds; only their view is cached.
        """
        if admin:
            meta = self._query_meta(name, admin=True)
        else:
            meta = self.cache.get_or_set(f'meta_detail_{name}', lambda: self._query_meta(name, admin=False))
        if meta is None:
            raise MetaError('Not found', 404)
        return meta

    def _query_meta(self, name, admin):
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                'SELECT * FROM metas WHERE alias = %s OR name = %s ORDER BY id ASC LIMIT 1',
                (name, name)
            )
            meta_data = cur.fetchone()
            if not meta_data:
                return None

            status_filter = '' if admin else "AND f.status = 'publish'"
            cur.execute(
                f'''SELECT f.* FROM feeds f
                    JOIN feed_metas fm ON fm.feed_id = f.id
                    WHERE fm.meta_id = %s {status_filter}
                    ORDER BY f.top DESC, f.created_at DESC, f.id DESC''',
                (meta_data['id'],)
            )
            feeds = render_feeds(cur, cur.fetchall(), admin=admin)

        data = Meta(**meta_data).to_dict()
        data['feeds'] = feeds
        return data
