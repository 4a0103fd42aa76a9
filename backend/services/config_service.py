import json
import logging
from typing import Any, Dict

from db import get_connection
from services.errors import ServiceError

logger = logging.getLogger(__name__)


class ConfigError(ServiceError):
    """Raised for unknown config types or malformed payloads"""


class ConfigService:
    """Key/value settings stored as JSON text in the info table.

    Client settings are readable by anyone; server settings only by admins.
    Keys are stored namespaced as '<type>.<key>'.
    """

    TYPES = ('client', 'server')

    DEFAULTS = {
        'client': {
            'counter.enabled': False,
        },
        'server': {},
    }

    def __init__(self, config_type: str):
        if config_type not in self.TYPES:
            raise ConfigError(f'Unknown config type: {config_type}', 400)
        self.config_type = config_type
        self.prefix = f'{config_type}.'

    def all(self) -> Dict[str, Any]:
        values = dict(self.DEFAULTS[self.config_type])
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('SELECT key, value FROM info')
            rows = cur.fetchall()
        for row in rows:
            if row['key'].startswith(self.prefix):
                values[row['key'][len(self.prefix):]] = json.loads(row['value'])
        return values

    def get_or_default(self, key: str, default: Any = None) -> Any:
        with get_connection() as conn:
            cur = conn.cursor()
            cur.execute('SELECT value FROM info WHERE key = %s', (self.prefix + key,))
            row = cur.fetchone()
        if row is None:
            return self.DEFAULTS[self.config_type].get(key, default)
        return json.loads(row['value'])

    def set(self, key: str, value: Any) -> None:
        with get_connection() as conn:
            cur = conn.cursor()
            self._upsert(cur, key, value)

    def update(self, values: Dict[str, Any]) -> None:
        if not isinstance(values, dict):
            raise ConfigError('Config body must be a JSON object', 400)
        with get_connection() as conn:
            cur = conn.cursor()
            for key, value in values.items():
                self._upsert(cur, key, value)
        logger.info("Updated %s config keys: %s", self.config_type, sorted(values))

    def _upsert(self, cur, key, value):
        cur.execute('DELETE FROM info WHERE key = %s', (self.prefix + key,))
        cur.execute('INSERT INTO info (key, value) VALUES (%s, %s)', (self.prefix + key, json.dumps(value)))


def client_config() -> ConfigService:
    return ConfigService('client')


def server_config() -> ConfigService:
    return ConfigService('server')
