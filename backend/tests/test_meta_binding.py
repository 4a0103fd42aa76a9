"""
Tests for tag/category resolution and binding
"""
import pytest

from db import get_connection
from services.meta_service import MetaError, bind_metas_to_post, generate_alias


@pytest.fixture
def feed_id(make_user):
    user_id, _ = make_user('writer', admin=True)
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            'INSERT INTO feeds (title, content, uid) VALUES (%s, %s, %s) RETURNING id',
            ('Post', 'Body', user_id)
        )
        return cur.fetchone()['id']


def bound_names(feed_id, meta_type):
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute(
            '''SELECT m.name FROM feed_metas fm JOIN metas m ON m.id = fm.meta_id
               WHERE fm.feed_id = %s AND fm.type = %s ORDER BY fm.id''',
            (feed_id, meta_type)
        )
        return [row['name'] for row in cur.fetchall()]


def meta_count():
    with get_connection() as conn:
        cur = conn.cursor()
        cur.execute('SELECT COUNT(*) AS count FROM metas')
        return cur.fetchone()['count']


class TestGenerateAlias:

    def test_lowercases_and_hyphenates(self):
        assert generate_alias('Hello World') == 'hello-world'

    def test_collapses_whitespace_runs(self):
        assert generate_alias('a  \t b') == 'a-b'

    def test_strips_symbols(self):
        assert generate_alias('C++ & Rust!') == 'c--rust'

    def test_keeps_hyphen_runs(self):
        assert generate_alias('a - b') == 'a---b'

    def test_keeps_cjk(self):
        assert generate_alias('Python 教程') == 'python-教程'

    def test_drops_non_han_scripts(self):
        assert generate_alias('café') == 'caf'


def test_binding_same_set_twice_is_idempotent(feed_id):
    with get_connection() as conn:
        bind_metas_to_post(conn.cursor(), feed_id, ['python', 'flask'], 'tag')
    with get_connection() as conn:
        bind_metas_to_post(conn.cursor(), feed_id, ['python', 'flask'], 'tag')

    assert bound_names(feed_id, 'tag') == ['python', 'flask']
    assert meta_count() == 2


def test_rebinding_replaces_previous_set(feed_id):
    with get_connection() as conn:
        bind_metas_to_post(conn.cursor(), feed_id, ['python', 'flask'], 'tag')
    with get_connection() as conn:
        bind_metas_to_post(conn.cursor(), feed_id, ['rust'], 'tag')

    assert bound_names(feed_id, 'tag') == ['rust']


def test_binding_empty_list_clears(feed_id):
    with get_connection() as conn:
        bind_metas_to_post(conn.cursor(), feed_id, ['python'], 'tag')
        bind_metas_to_post(conn.cursor(), feed_id, [], 'tag')

    assert bound_names(feed_id, 'tag') == []


def test_types_are_bound_independently(feed_id):
    with get_connection() as conn:
        cur = conn.cursor()
        bind_metas_to_post(cur, feed_id, ['python'], 'tag')
        bind_metas_to_post(cur, feed_id, ['python'], 'category')
        bind_metas_to_post(cur, feed_id, ['flask'], 'tag')

    assert bound_names(feed_id, 'tag') == ['flask']
    assert bound_names(feed_id, 'category') == ['python']
    # Same name, different type: two metas
    assert meta_count() == 3


def test_name_lookup_is_case_sensitive(feed_id):
    with get_connection() as conn:
        bind_metas_to_post(conn.cursor(), feed_id, ['Python', 'python'], 'tag')

    assert bound_names(feed_id, 'tag') == ['Python', 'python']
    assert meta_count() == 2


def test_duplicate_names_bind_once(feed_id):
    with get_connection() as conn:
        bind_metas_to_post(conn.cursor(), feed_id, ['python', 'python'], 'tag')

    assert bound_names(feed_id, 'tag') == ['python']


def test_new_meta_gets_generated_alias(feed_id):
    with get_connection() as conn:
        bind_metas_to_post(conn.cursor(), feed_id, ['Web Dev'], 'category')
        cur = conn.cursor()
        cur.execute('SELECT alias, type FROM metas WHERE name = %s', ('Web Dev',))
        row = cur.fetchone()

    assert row == {'alias': 'web-dev', 'type': 'category'}


def test_unknown_type_rejected(feed_id):
    with pytest.raises(MetaError):
        with get_connection() as conn:
            bind_metas_to_post(conn.cursor(), feed_id, ['x'], 'label')
