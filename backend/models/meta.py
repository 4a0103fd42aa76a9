from models.timestamps import to_iso

META_TYPES = ('tag', 'category')

class Meta:
    def __init__(self, id, name, type, alias=None, description=None, parent=None,
                 created_at=None, updated_at=None):
        self.id = id
        self.name = name
        self.alias = alias
        self.type = type
        self.description = description
        self.parent = parent
        self.created_at = created_at
        self.updated_at = updated_at

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'alias': self.alias,
            'type': self.type,
            'description': self.description,
            'parent': self.parent,
            'created_at': to_iso(self.created_at),
            'updated_at': to_iso(self.updated_at),
        }
