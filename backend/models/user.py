from werkzeug.security import generate_password_hash, check_password_hash
from models.timestamps import to_iso

class User:
    def __init__(self, id, username, openid, avatar=None, permission=0,
                 password_hash=None, created_at=None, updated_at=None):
        self.id = id
        self.username = username
        self.openid = openid
        self.avatar = avatar
        self.permission = permission or 0
        self.password_hash = password_hash
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def is_admin(self):
        return self.permission == 1

    @staticmethod
    def hash_password(password):
        """Hash a password for storing"""
        return generate_password_hash(password)

    def check_password(self, password):
        """Check hashed password"""
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'username': self.username,
            'avatar': self.avatar,
            'permission': self.is_admin,
            'created_at': to_iso(self.created_at),
            'updated_at': to_iso(self.updated_at),
        }
