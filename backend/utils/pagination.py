DEFAULT_LIMIT = 20
MAX_LIMIT = 50


def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def normalize_page(page, limit):
    """Return (zero-based page index, limit) from raw query values.

    page is 1-based: missing or <= 0 means the first page.
    limit defaults to 20 and never exceeds 50.
    """
    page_num = _to_int(page)
    if page_num is None or page_num <= 0:
        page_num = 1

    limit_num = _to_int(limit)
    if limit_num is None or limit_num <= 0:
        limit_num = DEFAULT_LIMIT
    elif limit_num > MAX_LIMIT:
        limit_num = MAX_LIMIT

    return page_num - 1, limit_num


def paginate_list(items, page_index, limit):
    """Slice an in-memory result list into the listing response shape"""
    start = page_index * limit
    end = start + limit
    return {
        'size': len(items),
        'data': items[start:end],
        'hasNext': len(items) > end,
    }


def empty_page():
    return {'size': 0, 'data': [], 'hasNext': False}
