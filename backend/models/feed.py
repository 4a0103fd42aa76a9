from models.timestamps import to_iso

VALID_STATUSES = ('publish', 'draft', 'private')

class Feed:
    def __init__(self, id, content, uid, alias=None, title=None, summary='',
                 property='post', top=0, allow_comment=1, status='publish', views=0,
                 created_at=None, updated_at=None):
        self.id = id
        self.alias = alias
        self.title = title
        self.summary = summary or ''
        self.content = content
        self.property = property
        self.top = top
        self.uid = uid
        self.allow_comment = allow_comment
        self.status = status
        self.views = views
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def is_public(self):
        return self.status == 'publish'

    def short_summary(self, length=100):
        """Stored summary, or the head of the content when no summary was written"""
        if self.summary:
            return self.summary
        return self.content[:length]

    def to_dict(self, admin=False, include_content=True):
        """Convert to dictionary; status/property are admin-only columns"""
        data = {
            'id': self.id,
            'alias': self.alias,
            'title': self.title,
            'summary': self.summary if include_content else self.short_summary(),
            'top': self.top,
            'uid': self.uid,
            'allow_comment': bool(self.allow_comment),
            'views': self.views,
            'created_at': to_iso(self.created_at),
            'updated_at': to_iso(self.updated_at),
        }
        if include_content:
            data['content'] = self.content
        if admin:
            data['status'] = self.status
            data['property'] = self.property
        return data
