"""
Tests for the /friend endpoints, with outbound HTTP mocked
"""
from unittest.mock import patch, MagicMock

import pytest
import requests

FRIEND = {'name': 'Neighbour', 'desc': 'A blog next door', 'avatar': 'https://n.example/a.png',
          'url': 'https://n.example'}


def test_user_application_is_pending(client, reader, admin):
    _, headers = reader
    _, admin_headers = admin

    response = client.post('/friend', headers=headers, json=FRIEND)
    assert response.status_code == 201
    assert response.get_json()['accepted'] is False

    public = client.get('/friend').get_json()
    assert public['friend_list'] == []
    assert 'apply_list' not in public

    own = client.get('/friend', headers=headers).get_json()
    assert own['apply']['name'] == 'Neighbour'

    moderated = client.get('/friend', headers=admin_headers).get_json()
    assert [f['name'] for f in moderated['apply_list']] == ['Neighbour']


def test_admin_friend_is_accepted(client, admin):
    _, headers = admin
    client.post('/friend', headers=headers, json=FRIEND)

    friends = client.get('/friend').get_json()['friend_list']
    assert [f['desc'] for f in friends] == ['A blog next door']


def test_single_application_per_user(client, reader):
    _, headers = reader
    client.post('/friend', headers=headers, json=FRIEND)
    response = client.post('/friend', headers=headers, json=FRIEND)
    assert response.status_code == 400
    assert response.get_data(as_text=True) == 'Already applied'


@pytest.mark.parametrize('missing', ['name', 'avatar', 'url'])
def test_required_fields(client, reader, missing):
    _, headers = reader
    body = dict(FRIEND)
    del body[missing]
    assert client.post('/friend', headers=headers, json=body).status_code == 400


def test_admin_accepts_and_user_edit_resets(client, reader, admin):
    _, headers = reader
    _, admin_headers = admin
    friend_id = client.post('/friend', headers=headers, json=FRIEND).get_json()['id']

    # Applicants cannot accept themselves
    response = client.put(f'/friend/{friend_id}', headers=headers, json={'accepted': True})
    assert response.get_json()['accepted'] is False

    response = client.put(f'/friend/{friend_id}', headers=admin_headers, json={'accepted': True})
    assert response.get_json()['accepted'] is True

    response = client.put(f'/friend/{friend_id}', headers=headers, json={'name': 'Renamed'})
    assert response.get_json()['name'] == 'Renamed'
    assert response.get_json()['accepted'] is False


def test_update_and_delete_by_stranger_forbidden(client, reader, make_user):
    _, headers = reader
    _, stranger = make_user('stranger')
    friend_id = client.post('/friend', headers=headers, json=FRIEND).get_json()['id']

    assert client.put(f'/friend/{friend_id}', headers=stranger, json={'name': 'x'}).status_code == 403
    assert client.delete(f'/friend/{friend_id}', headers=stranger).status_code == 403
    assert client.delete(f'/friend/{friend_id}', headers=headers).status_code == 200
    assert client.delete(f'/friend/{friend_id}', headers=headers).status_code == 404


def test_health_check(client, admin):
    _, headers = admin
    ok = client.post('/friend', headers=headers, json=FRIEND).get_json()['id']
    broken = client.post('/friend', headers=headers, json=dict(FRIEND, url='https://broken.example')).get_json()['id']
    down = client.post('/friend', headers=headers, json=dict(FRIEND, url='https://down.example')).get_json()['id']

    def fake_get(url, timeout):
        if url == 'https://down.example':
            raise requests.ConnectionError('connection refused')
        response = MagicMock()
        response.status_code = 500 if url == 'https://broken.example' else 200
        return response

    with patch('services.friend_service.requests.get', side_effect=fake_get):
        response = client.post('/friend/health', headers=headers)

    assert response.status_code == 200
    results = response.get_json()
    assert results[str(ok)] == ''
    assert results[str(broken)] == 'HTTP 500'
    assert 'connection refused' in results[str(down)]

    stored = {f['id']: f['health'] for f in client.get('/friend').get_json()['friend_list']}
    assert stored[broken] == 'HTTP 500'


def test_health_check_requires_admin(client, reader):
    _, headers = reader
    assert client.post('/friend/health', headers=headers).status_code == 403
