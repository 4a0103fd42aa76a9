from db.database import get_connection
from db.init_db import init_database

__all__ = ['get_connection', 'init_database']
