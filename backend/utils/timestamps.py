from datetime import datetime, timezone

DB_FORMAT = '%Y-%m-%d %H:%M:%S'


def now_timestamp():
    """Current UTC time in the same text form as CURRENT_TIMESTAMP"""
    return datetime.now(timezone.utc).strftime(DB_FORMAT)


def parse_timestamp(value):
    """Parse an ISO-8601 string or epoch number into the database text form.

    Returns None for empty input and raises ValueError for garbage.
    Epoch values above 1e11 are taken as milliseconds.
    """
    if value is None or value == '':
        return None

    if isinstance(value, bool):
        raise ValueError(f'Invalid timestamp: {value!r}')

    if isinstance(value, (int, float)):
        seconds = value / 1000 if value > 1e11 else value
        parsed = datetime.fromtimestamp(seconds, tz=timezone.utc)
    else:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc).strftime(DB_FORMAT)
