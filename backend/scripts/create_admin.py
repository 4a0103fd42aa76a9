import sys
import os
import logging
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from db import get_connection, init_database
from models import User
from utils.logging_config import setup_logger

setup_logger(log_file="scripts.log")
logger = logging.getLogger("create_admin")

username = os.environ.get('ADMIN_USERNAME', 'admin')
password = os.environ.get('ADMIN_PASSWORD')

if not password:
    logger.error("Set ADMIN_PASSWORD to create the admin account")
    sys.exit(1)

init_database()

with get_connection() as conn:
    cur = conn.cursor()

    # Check if user already exists
    cur.execute('SELECT id FROM users WHERE username = %s', (username,))
    existing = cur.fetchone()

    if existing:
        # Promote the existing account
        cur.execute('UPDATE users SET permission = 1 WHERE id = %s', (existing['id'],))
        logger.info("User '%s' already exists with ID %s, granted admin", username, existing['id'])
    else:
        cur.execute(
            '''INSERT INTO users (username, openid, permission, password_hash)
               VALUES (%s, %s, 1, %s) RETURNING id''',
            (username, f'local:{username}', User.hash_password(password))
        )
        user_id = cur.fetchone()['id']
        logger.info("Created admin '%s' with ID %s", username, user_id)
