from models.timestamps import to_iso

class Friend:
    def __init__(self, id, name, avatar, url, uid, description=None, accepted=0,
                 health='', created_at=None, updated_at=None):
        self.id = id
        self.name = name
        self.description = description
        self.avatar = avatar
        self.url = url
        self.uid = uid
        self.accepted = accepted
        self.health = health
        self.created_at = created_at
        self.updated_at = updated_at

    def to_dict(self):
        """Convert to dictionary ('desc' is the public name of the description column)"""
        return {
            'id': self.id,
            'name': self.name,
            'desc': self.description,
            'avatar': self.avatar,
            'url': self.url,
            'uid': self.uid,
            'accepted': bool(self.accepted),
            'health': self.health,
            'created_at': to_iso(self.created_at),
            'updated_at': to_iso(self.updated_at),
        }
