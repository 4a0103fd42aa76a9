import sqlite3
import os
from contextlib import contextmanager
from config import Config

def dict_factory(cursor, row):
    """Convert row to dictionary"""
    fields = [column[0] for column in cursor.description]
    return {key: value for key, value in zip(fields, row)}

def sqlite_path(db_url):
    """Resolve the file path of a sqlite:/// URL"""
    db_path = db_url.replace('sqlite:///', '')

    # Get absolute path
    if not os.path.isabs(db_path):
        db_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), db_path)
    return db_path

class SQLiteCursorWrapper:
    """Wrapper to make SQLite cursor accept the %s placeholders used by psycopg2"""
    def __init__(self, cursor):
        self._cursor = cursor

    def execute(self, query, params=None):
        """Execute query with %s placeholders translated to ?"""
        query = query.replace('%s', '?')
        if params:
            return self._cursor.execute(query, params)
        return self._cursor.execute(query)

    def fetchone(self):
        return self._cursor.fetchone()

    def fetchall(self):
        return self._cursor.fetchall()

    @property
    def rowcount(self):
        """Get number of affected rows"""
        return self._cursor.rowcount

    def __getattr__(self, name):
        """Proxy other attributes to underlying cursor"""
        return getattr(self._cursor, name)

class SQLiteConnectionWrapper:
    """Wrapper so conn.cursor() hands out placeholder-translating cursors"""
    def __init__(self, conn):
        self._conn = conn

    def cursor(self):
        return SQLiteCursorWrapper(self._conn.cursor())

    def __getattr__(self, name):
        """Proxy other attributes to underlying connection"""
        return getattr(self._conn, name)

class PostgreSQLConnectionWrapper:
    """Wrapper to make PostgreSQL connection work like SQLite"""
    def __init__(self, conn):
        self._conn = conn

    def cursor(self):
        """Return a RealDictCursor that returns rows as dictionaries"""
        from psycopg2.extras import RealDictCursor
        return self._conn.cursor(cursor_factory=RealDictCursor)

    def __getattr__(self, name):
        """Proxy other attributes to underlying connection"""
        return getattr(self._conn, name)

def is_postgres_url(db_url):
    return db_url.startswith('postgres://') or db_url.startswith('postgresql://')

@contextmanager
def get_connection():
    """Get database connection as context manager.

    Commits when the block exits cleanly and rolls back on any exception.
    Cursors return rows as dicts and take %s placeholders on both engines.
    """
    db_url = Config.SQLALCHEMY_DATABASE_URI

    # Handle SQLite
    if db_url.startswith('sqlite:///'):
        conn = sqlite3.connect(sqlite_path(db_url))
        conn.row_factory = dict_factory
        conn.execute('PRAGMA foreign_keys = ON')
        wrapped_conn = SQLiteConnectionWrapper(conn)

    # Handle PostgreSQL
    elif is_postgres_url(db_url):
        import psycopg2

        conn = psycopg2.connect(db_url)
        wrapped_conn = PostgreSQLConnectionWrapper(conn)

    else:
        raise ValueError(f"Unsupported database URL format: {db_url}")

    try:
        yield wrapped_conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
