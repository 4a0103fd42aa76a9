import logging
from typing import Dict, Optional

from flask_jwt_extended import create_access_token

from db import get_connection
from models import User
from services.errors import ServiceError

logger = logging.getLogger(__name__)


class UserError(ServiceError):
    """Raised for registration and login failures"""


class UserService:
    """Local accounts; the first account registered becomes the admin"""

    def register(self, username: Optional[str], password: Optional[str], avatar: Optional[str] = None) -> Dict:
        if not all([username, password]):
            raise UserError('Missing required fields', 400)

        with get_connection() as conn:
            cur = conn.cursor()

            cur.execute('SELECT id FROM users WHERE username = %s', (username,))
            if cur.fetchone():
                raise UserError('User already exists', 409)

            cur.execute('SELECT COUNT(*) AS count FROM users')
            permission = 1 if cur.fetchone()['count'] == 0 else 0

            cur.execute(
                '''INSERT INTO users (username, openid, avatar, permission, password_hash)
                   VALUES (%s, %s, %s, %s, %s) RETURNING id''',
                (username, f'local:{username}', avatar, permission, User.hash_password(password))
            )
            user_id = cur.fetchone()['id']

            cur.execute('SELECT * FROM users WHERE id = %s', (user_id,))
            user = User(**cur.fetchone())

        logger.info("Registered user %s (admin=%s)", username, user.is_admin)
        return self._session(user)

    def login(self, username: Optional[str], password: Optional[str]) -> Dict:
        if not all([username, password]):
            raise UserError('Missing required fields', 400)

        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('SELECT * FROM users WHERE username = %s', (username,))
            user_data = cur.fetchone()

        if not user_data:
            raise UserError('Invalid credentials', 401)

        user = User(**user_data)
        if not user.check_password(password):
            raise UserError('Invalid credentials', 401)

        return self._session(user)

    @staticmethod
    def _session(user: User) -> Dict:
        # JWT identity must be a string
        return {
            'access_token': create_access_token(identity=str(user.id)),
            'user': user.to_dict()
        }
