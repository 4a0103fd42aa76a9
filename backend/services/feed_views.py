"""Turn feed rows into response dicts with their tags, categories and author."""
from typing import Dict, Iterable, List

from models import Feed
from utils.content import extract_image


def _placeholders(values):
    return ', '.join(['%s'] * len(values))


def load_metas(cur, feed_ids: Iterable[int]) -> Dict[int, Dict[str, List[dict]]]:
    """Map feed id -> {'tags': [...], 'categories': [...]} in binding order"""
    feed_ids = list(feed_ids)
    grouped = {feed_id: {'tags': [], 'categories': []} for feed_id in feed_ids}
    if not feed_ids:
        return grouped

    cur.execute(
        f'''SELECT fm.feed_id, m.id, m.name, m.type
            FROM feed_metas fm
            JOIN metas m ON m.id = fm.meta_id AND m.type = fm.type
            WHERE fm.feed_id IN ({_placeholders(feed_ids)})
            ORDER BY fm.id ASC''',
        tuple(feed_ids)
    )
    for row in cur.fetchall():
        meta = {'id': row['id'], 'name': row['name'], 'type': row['type']}
        bucket = 'tags' if row['type'] == 'tag' else 'categories'
        grouped[row['feed_id']][bucket].append(meta)
    return grouped


def load_users(cur, uids: Iterable[int]) -> Dict[int, dict]:
    """Map user id -> public author fields"""
    uids = sorted(set(uids))
    if not uids:
        return {}
    cur.execute(
        f'SELECT id, username, avatar FROM users WHERE id IN ({_placeholders(uids)})',
        tuple(uids)
    )
    return {row['id']: {'id': row['id'], 'username': row['username'], 'avatar': row['avatar']}
            for row in cur.fetchall()}


def render_feeds(cur, rows, admin=False, include_content=False) -> List[dict]:
    """Render feed rows for listings: summary instead of content, plus relations"""
    feeds = [Feed(**row) for row in rows]
    metas = load_metas(cur, [feed.id for feed in feeds])
    users = load_users(cur, [feed.uid for feed in feeds])

    rendered = []
    for feed in feeds:
        data = feed.to_dict(admin=admin, include_content=include_content)
        data['tags'] = metas[feed.id]['tags']
        data['categories'] = metas[feed.id]['categories']
        data['avatar'] = extract_image(feed.content)
        data['user'] = users.get(feed.uid)
        rendered.append(data)
    return rendered


def render_feed_detail(cur, row) -> dict:
    """Render a single feed with full content and every column"""
    return render_feeds(cur, [row], admin=True, include_content=True)[0]
