from models.timestamps import to_iso

class Comment:
    def __init__(self, id, feed_id, user_id, content, created_at=None, updated_at=None):
        self.id = id
        self.feed_id = feed_id
        self.user_id = user_id
        self.content = content
        self.created_at = created_at
        self.updated_at = updated_at

    def to_dict(self):
        return {
            'id': self.id,
            'feed_id': self.feed_id,
            'user_id': self.user_id,
            'content': self.content,
            'created_at': to_iso(self.created_at),
            'updated_at': to_iso(self.updated_at),
        }
