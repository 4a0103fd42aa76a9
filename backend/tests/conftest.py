import os
import sys
import shutil
import tempfile
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

# Point the app at a throwaway database before config is imported
_tmp_dir = tempfile.mkdtemp(prefix='inkpress_test_')
os.environ['DATABASE_URL'] = 'sqlite:///' + os.path.join(_tmp_dir, 'test.db')
os.environ['STORAGE_PATH'] = os.path.join(_tmp_dir, 'storage')
os.environ['LOG_DIR'] = os.path.join(_tmp_dir, 'log')
os.environ['CACHE_BACKEND'] = 'memory'

TABLES = ['comments', 'feed_metas', 'feeds', 'metas', 'friends', 'info', 'cache_entries', 'users']


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_tmp_dir, ignore_errors=True)


@pytest.fixture
def app():
    from app import app
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    """Create test client"""
    with app.test_client() as client:
        yield client


@pytest.fixture(autouse=True)
def clean_database(app):
    """Clean database and cache before each test"""
    from db import get_connection
    from services.cache_service import get_cache

    with get_connection() as conn:
        cur = conn.cursor()
        # Delete in order due to foreign key constraints
        for table in TABLES:
            cur.execute(f"DELETE FROM {table}")
    get_cache().clear()
    yield


@pytest.fixture
def make_user(app):
    """Factory inserting a user and returning (user_id, auth headers)"""
    from flask_jwt_extended import create_access_token
    from db import get_connection
    from models import User

    def _make_user(username, admin=False):
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute(
                '''INSERT INTO users (username, openid, permission, password_hash)
                   VALUES (%s, %s, %s, %s) RETURNING id''',
                (username, f'local:{username}', 1 if admin else 0, User.hash_password('password123'))
            )
            user_id = cur.fetchone()['id']

        with app.app_context():
            token = create_access_token(identity=str(user_id))
        return user_id, {'Authorization': f'Bearer {token}'}

    return _make_user


@pytest.fixture
def admin(make_user):
    """(user_id, headers) of an admin"""
    return make_user('admin', admin=True)


@pytest.fixture
def reader(make_user):
    """(user_id, headers) of a regular user"""
    return make_user('reader')


@pytest.fixture
def create_feed(client, admin):
    """Factory creating a feed through the API as the admin; returns its id"""
    _, headers = admin

    def _create_feed(title, content=None, **fields):
        body = {
            'title': title,
            'content': content or f'Content of {title}',
            'summary': '',
            'status': 'publish',
            'property': 'post',
            'tags': [],
            'allow_comment': True,
        }
        body.update(fields)
        response = client.post('/feed', headers=headers, json=body)
        assert response.status_code == 200, response.get_data(as_text=True)
        return response.get_json()['insertedId']

    return _create_feed
