import pytest

from utils.content import extract_image
from utils.pagination import normalize_page
from utils.timestamps import parse_timestamp


@pytest.mark.parametrize('content, expected', [
    ('no images', None),
    ('', None),
    ('![alt](https://a.example/1.png) and ![b](https://a.example/2.png)', 'https://a.example/1.png'),
    ('![t](https://a.example/t.png "Title")', 'https://a.example/t.png'),
    ('<img src="https://a.example/h.png"> then ![m](https://a.example/m.png)', 'https://a.example/h.png'),
])
def test_extract_image(content, expected):
    assert extract_image(content) == expected


@pytest.mark.parametrize('page, limit, expected', [
    (None, None, (0, 20)),
    ('3', '10', (2, 10)),
    ('0', '0', (0, 20)),
    ('-1', '100', (0, 50)),
    ('x', 'y', (0, 20)),
])
def test_normalize_page(page, limit, expected):
    assert normalize_page(page, limit) == expected


def test_parse_timestamp():
    assert parse_timestamp(None) is None
    assert parse_timestamp('2024-03-01T10:00:00+02:00') == '2024-03-01 08:00:00'
    assert parse_timestamp(0) == '1970-01-01 00:00:00'
    assert parse_timestamp(1_000_000_000_000) == '2001-09-09 01:46:40'
    with pytest.raises(ValueError):
        parse_timestamp('soon')
