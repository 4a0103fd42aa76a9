import logging
from typing import Dict, Optional

import requests

from config import Config
from db import get_connection
from models import Friend
from services.errors import ServiceError
from utils.timestamps import now_timestamp

logger = logging.getLogger(__name__)


class FriendError(ServiceError):
    """Raised for friend link validation, permission and lookup failures"""


class FriendService:
    """Friend links: public list, applications from users, admin review"""

    REQUIRED_FIELDS = ('name', 'avatar', 'url')

    def __init__(self, timeout: Optional[int] = None):
        self.timeout = timeout or Config.FRIEND_HEALTH_TIMEOUT

    def list_friends(self, uid: Optional[int] = None, admin: bool = False) -> Dict:
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('SELECT * FROM friends ORDER BY created_at ASC, id ASC')
            friends = [Friend(**row) for row in cur.fetchall()]

        result = {'friend_list': [f.to_dict() for f in friends if f.accepted]}
        if admin:
            result['apply_list'] = [f.to_dict() for f in friends if not f.accepted]
        if uid is not None:
            own = next((f for f in friends if f.uid == uid), None)
            result['apply'] = own.to_dict() if own else None
        return result

    def create_friend(self, data: Dict, uid: int, admin: bool = False) -> Dict:
        for field in self.REQUIRED_FIELDS:
            if not data.get(field):
                raise FriendError(f'{field.capitalize()} is required', 400)

        with get_connection() as conn:
            cur = conn.cursor()
            if not admin:
                cur.execute('SELECT id FROM friends WHERE uid = %s', (uid,))
                if cur.fetchone():
                    raise FriendError('Already applied', 400)

            cur.execute(
                '''INSERT INTO friends (name, description, avatar, url, uid, accepted)
                   VALUES (%s, %s, %s, %s, %s, %s) RETURNING id''',
                (data['name'], data.get('desc'), data['avatar'], data['url'], uid, 1 if admin else 0)
            )
            friend_id = cur.fetchone()['id']
            cur.execute('SELECT * FROM friends WHERE id = %s', (friend_id,))
            friend = Friend(**cur.fetchone())

        logger.info("Friend link %s created by user %s (accepted=%s)", friend_id, uid, admin)
        return friend.to_dict()

    def update_friend(self, friend_id: int, data: Dict, uid: int, admin: bool = False) -> Dict:
        with get_connection() as conn:
            cur = conn.cursor()
            friend = self._get_owned_friend(cur, friend_id, uid, admin)

            fields = {}
            for key, column in (('name', 'name'), ('desc', 'description'), ('avatar', 'avatar'), ('url', 'url')):
                if data.get(key) is not None:
                    fields[column] = data[key]
            if admin:
                if data.get('accepted') is not None:
                    fields['accepted'] = 1 if data['accepted'] else 0
            else:
                # Edits by the applicant go back to review
                fields['accepted'] = 0
            fields['updated_at'] = now_timestamp()

            assignments = ', '.join(f'{column} = %s' for column in fields)
            cur.execute(
                f'UPDATE friends SET {assignments} WHERE id = %s',
                tuple(fields.values()) + (friend.id,)
            )
            cur.execute('SELECT * FROM friends WHERE id = %s', (friend.id,))
            return Friend(**cur.fetchone()).to_dict()

    def delete_friend(self, friend_id: int, uid: int, admin: bool = False) -> None:
        with get_connection() as conn:
            cur = conn.cursor()
            friend = self._get_owned_friend(cur, friend_id, uid, admin)
            cur.execute('DELETE FROM friends WHERE id = %s', (friend.id,))

    def check_health(self) -> Dict[int, str]:
        """Probe every friend URL; health is '' when reachable, else the failure"""
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('SELECT id, url FROM friends')
            rows = cur.fetchall()

        results = {}
        for row in rows:
            results[row['id']] = self._probe(row['url'])

        with get_connection() as conn:
            cur = conn.cursor()
            for friend_id, health in results.items():
                cur.execute('UPDATE friends SET health = %s WHERE id = %s', (health, friend_id))
        return results

    def _probe(self, url: str) -> str:
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Friend link %s unreachable: %s", url, e)
            return str(e)
        if response.status_code >= 400:
            logger.warning("Friend link %s answered %s", url, response.status_code)
            return f'HTTP {response.status_code}'
        return ''

    def _get_owned_friend(self, cur, friend_id, uid, admin) -> Friend:
        cur.execute('SELECT * FROM friends WHERE id = %s', (friend_id,))
        friend_data = cur.fetchone()
        if not friend_data:
            raise FriendError('Not found', 404)
        friend = Friend(**friend_data)
        if friend.uid != uid and not admin:
            raise FriendError('Permission denied', 403)
        return friend
