"""
Tests for the /comment endpoints
"""


def test_comment_flow(client, create_feed, reader):
    feed_id = create_feed('Discuss')
    uid, headers = reader

    response = client.post(f'/comment/{feed_id}', headers=headers, json={'content': 'Nice post'})
    assert response.status_code == 201
    assert response.get_json()['user_id'] == uid

    comments = client.get(f'/comment/{feed_id}').get_json()
    assert len(comments) == 1
    assert comments[0]['content'] == 'Nice post'
    assert comments[0]['user']['username'] == 'reader'


def test_comment_requires_login(client, create_feed):
    feed_id = create_feed('Discuss')
    response = client.post(f'/comment/{feed_id}', json={'content': 'anon'})
    assert response.status_code == 401


def test_comment_requires_content(client, create_feed, reader):
    feed_id = create_feed('Discuss')
    _, headers = reader
    response = client.post(f'/comment/{feed_id}', headers=headers, json={'content': '  '})
    assert response.status_code == 400


def test_comment_disabled(client, create_feed, reader):
    feed_id = create_feed('Quiet', allow_comment=False)
    _, headers = reader

    response = client.post(f'/comment/{feed_id}', headers=headers, json={'content': 'hello'})

    assert response.status_code == 403
    assert response.get_data(as_text=True) == 'Comment not allowed'


def test_comment_unknown_feed(client, reader):
    _, headers = reader
    assert client.post('/comment/999', headers=headers, json={'content': 'x'}).status_code == 404
    assert client.get('/comment/999').status_code == 404


def test_delete_comment_permissions(client, create_feed, reader, make_user, admin):
    feed_id = create_feed('Discuss')
    _, reader_headers = reader
    _, other_headers = make_user('other')
    _, admin_headers = admin

    first = client.post(f'/comment/{feed_id}', headers=reader_headers, json={'content': 'one'}).get_json()['id']
    second = client.post(f'/comment/{feed_id}', headers=reader_headers, json={'content': 'two'}).get_json()['id']

    assert client.delete(f'/comment/{first}', headers=other_headers).status_code == 403
    assert client.delete(f'/comment/{first}', headers=reader_headers).status_code == 200
    assert client.delete(f'/comment/{second}', headers=admin_headers).status_code == 200
    assert client.delete(f'/comment/{second}', headers=admin_headers).status_code == 404
    assert client.get(f'/comment/{feed_id}').get_json() == []
