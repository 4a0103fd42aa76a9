import logging
from config import Config
from db.database import is_postgres_url, sqlite_path

logger = logging.getLogger(__name__)

# {pk} is filled per engine; everything else is portable SQL
TABLES = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id {pk},
        username VARCHAR(80) UNIQUE NOT NULL,
        openid VARCHAR(255) NOT NULL,
        avatar VARCHAR(500),
        permission INTEGER DEFAULT 0,
        password_hash VARCHAR(255),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS feeds (
        id {pk},
        alias VARCHAR(255),
        title VARCHAR(500),
        summary TEXT NOT NULL DEFAULT '',
        content TEXT NOT NULL,
        property VARCHAR(20) NOT NULL DEFAULT 'post',
        top INTEGER NOT NULL DEFAULT 0,
        uid INTEGER NOT NULL,
        allow_comment INTEGER NOT NULL DEFAULT 1,
        status VARCHAR(20) NOT NULL DEFAULT 'publish',
        views INTEGER NOT NULL DEFAULT 0,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (uid) REFERENCES users(id)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS metas (
        id {pk},
        name VARCHAR(255) NOT NULL,
        alias VARCHAR(255),
        type VARCHAR(20) NOT NULL,
        description TEXT,
        parent INTEGER,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (parent) REFERENCES metas(id) ON DELETE SET NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS feed_metas (
        id {pk},
        feed_id INTEGER NOT NULL,
        meta_id INTEGER NOT NULL,
        type VARCHAR(20) NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (feed_id) REFERENCES feeds(id) ON DELETE CASCADE,
        FOREIGN KEY (meta_id) REFERENCES metas(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS comments (
        id {pk},
        feed_id INTEGER NOT NULL,
        user_id INTEGER NOT NULL,
        content TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (feed_id) REFERENCES feeds(id) ON DELETE CASCADE,
        FOREIGN KEY (user_id) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS friends (
        id {pk},
        name VARCHAR(200) NOT NULL,
        description TEXT,
        avatar VARCHAR(500) NOT NULL,
        url VARCHAR(500) NOT NULL,
        uid INTEGER NOT NULL,
        accepted INTEGER NOT NULL DEFAULT 0,
        health TEXT NOT NULL DEFAULT '',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (uid) REFERENCES users(id) ON DELETE CASCADE
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS info (
        key VARCHAR(255) UNIQUE NOT NULL,
        value TEXT NOT NULL
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS cache_entries (
        key VARCHAR(512) PRIMARY KEY,
        value TEXT NOT NULL,
        expires_at FLOAT
    );
    """,
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_users_username ON users(username);",
    "CREATE INDEX IF NOT EXISTS idx_feeds_listing ON feeds(status, property, top, created_at);",
    "CREATE INDEX IF NOT EXISTS idx_feeds_alias ON feeds(alias);",
    "CREATE INDEX IF NOT EXISTS idx_metas_name_type ON metas(name, type);",
    "CREATE INDEX IF NOT EXISTS idx_feed_metas_feed ON feed_metas(feed_id, type);",
    "CREATE INDEX IF NOT EXISTS idx_feed_metas_meta ON feed_metas(meta_id);",
    "CREATE INDEX IF NOT EXISTS idx_comments_feed_id ON comments(feed_id);",
    "CREATE INDEX IF NOT EXISTS idx_friends_uid ON friends(uid);",
]

def init_database():
    """Initialize database with all tables (supports SQLite and PostgreSQL)"""
    db_url = Config.SQLALCHEMY_DATABASE_URI

    if is_postgres_url(db_url):
        return init_postgres_database(db_url)
    elif db_url.startswith('sqlite:///'):
        return init_sqlite_database(db_url)
    else:
        logger.error("Unsupported DATABASE_URL format: %s", db_url)
        return False

def create_schema(cur, pk):
    for statement in TABLES:
        cur.execute(statement.format(pk=pk))
    for statement in INDEXES:
        cur.execute(statement)

def init_postgres_database(db_url):
    """Initialize PostgreSQL database"""
    import psycopg2

    conn = psycopg2.connect(db_url)
    try:
        cur = conn.cursor()
        create_schema(cur, 'SERIAL PRIMARY KEY')
        conn.commit()
        logger.info("PostgreSQL database initialized successfully")
        return True
    except Exception:
        logger.exception("Failed to initialize PostgreSQL database")
        conn.rollback()
        return False
    finally:
        conn.close()

def init_sqlite_database(db_url):
    """Initialize SQLite database"""
    import sqlite3

    db_path = sqlite_path(db_url)

    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        create_schema(cur, 'INTEGER PRIMARY KEY AUTOINCREMENT')
        conn.commit()
        logger.info("SQLite database initialized at: %s", db_path)
        return True
    except Exception:
        logger.exception("Failed to initialize SQLite database")
        conn.rollback()
        return False
    finally:
        conn.close()

if __name__ == '__main__':
    init_database()
