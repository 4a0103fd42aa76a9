def to_iso(value):
    """SQLite returns timestamps as strings, PostgreSQL as datetimes"""
    return value.isoformat() if hasattr(value, 'isoformat') else value
