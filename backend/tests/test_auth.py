import pytest

def test_register_user(client):
    """Test user registration"""
    response = client.post('/user/register', json={
        'username': 'testuser',
        'password': 'password123'
    })
    assert response.status_code == 201
    data = response.get_json()
    assert 'access_token' in data
    assert data['user']['username'] == 'testuser'

def test_first_user_is_admin(client):
    """The first account becomes admin, later ones do not"""
    first = client.post('/user/register', json={'username': 'owner', 'password': 'pw'}).get_json()
    second = client.post('/user/register', json={'username': 'guest', 'password': 'pw'}).get_json()

    assert first['user']['permission'] is True
    assert second['user']['permission'] is False

def test_register_duplicate(client):
    client.post('/user/register', json={'username': 'testuser', 'password': 'password123'})
    response = client.post('/user/register', json={'username': 'testuser', 'password': 'other'})
    assert response.status_code == 409

def test_register_missing_fields(client):
    response = client.post('/user/register', json={'username': 'testuser'})
    assert response.status_code == 400

def test_login_user(client):
    """Test user login"""
    # Register user first
    client.post('/user/register', json={
        'username': 'testuser',
        'password': 'password123'
    })

    # Login
    response = client.post('/user/login', json={
        'username': 'testuser',
        'password': 'password123'
    })
    assert response.status_code == 200
    data = response.get_json()
    assert 'access_token' in data
    assert data['user']['username'] == 'testuser'

def test_login_invalid_credentials(client):
    """Test login with invalid credentials"""
    response = client.post('/user/login', json={
        'username': 'nonexistent',
        'password': 'wrong'
    })
    assert response.status_code == 401

def test_profile(client):
    token = client.post('/user/register', json={
        'username': 'testuser',
        'password': 'password123'
    }).get_json()['access_token']

    response = client.get('/user/profile', headers={'Authorization': f'Bearer {token}'})
    assert response.status_code == 200
    assert response.get_json()['username'] == 'testuser'

def test_profile_requires_login(client):
    assert client.get('/user/profile').status_code == 401

def test_invalid_token_rejected(client):
    response = client.get('/feed', headers={'Authorization': 'Bearer not-a-jwt'})
    assert response.status_code == 401
