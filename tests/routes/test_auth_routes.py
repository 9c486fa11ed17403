"""Tests for /api/auth endpoints and bearer-token handling."""

from datetime import timedelta

import jwt
import pytest

from component_studio.extensions import db
from component_studio.models import User
from component_studio.services.auth_service import AuthService

pytestmark = pytest.mark.integration


class TestRegister:

    def test_register_returns_token_and_user(self, client):
        response = client.post('/api/auth/register', json={
            'email': 'Grace@Example.com', 'password': 'hopper1', 'name': 'Grace Hopper',
        })
        assert response.status_code == 201
        body = response.get_json()
        assert body['message'] == 'User registered successfully'
        assert body['user']['email'] == 'grace@example.com'
        assert body['user']['name'] == 'Grace Hopper'
        assert body['user']['preferences']['theme'] == 'light'
        assert 'password' not in body['user']
        assert body['token']

    def test_token_expires_after_seven_days(self, app, register):
        _, body = register()
        claims = jwt.decode(body['token'], app.config['JWT_SECRET'], algorithms=['HS256'])
        assert claims['exp'] - claims['iat'] == 7 * 24 * 3600
        assert claims['user_id'] == body['user']['id']

    def test_password_is_hashed(self, register):
        _, body = register()
        user = db.session.get(User, body['user']['id'])
        assert user.password_hash != 'secret123'
        assert user.check_password('secret123')

    def test_duplicate_email_rejected(self, client, register):
        register()
        response = client.post('/api/auth/register', json={
            'email': 'ADA@example.com', 'password': 'another1', 'name': 'Someone',
        })
        assert response.status_code == 400
        assert response.get_json()['error'] == 'User already exists with this email'

    @pytest.mark.parametrize('payload', [
        {'email': 'not-an-email', 'password': 'secret123', 'name': 'Ada'},
        {'email': 'ada@example.com', 'password': '123', 'name': 'Ada'},
        {'email': 'ada@example.com', 'password': 'secret123', 'name': 'A'},
        {'password': 'secret123', 'name': 'Ada'},
    ])
    def test_invalid_registration(self, client, payload):
        response = client.post('/api/auth/register', json=payload)
        assert response.status_code == 400
        assert response.get_json()['error']

    def test_non_object_body(self, client):
        response = client.post('/api/auth/register', json=['ada@example.com'])
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Request body must be a JSON object'


class TestLogin:

    def test_login_with_correct_password(self, client, register):
        register()
        response = client.post('/api/auth/login', json={'email': 'ada@example.com', 'password': 'secret123'})
        assert response.status_code == 200
        body = response.get_json()
        assert body['message'] == 'Login successful'
        assert body['token']
        me = client.get('/api/auth/me', headers={'Authorization': f"Bearer {body['token']}"})
        assert me.status_code == 200

    @pytest.mark.parametrize('email, password', [
        ('ada@example.com', 'wrong-password'),
        ('nobody@example.com', 'secret123'),
    ])
    def test_bad_credentials_look_the_same(self, client, register, email, password):
        register()
        response = client.post('/api/auth/login', json={'email': email, 'password': password})
        assert response.status_code == 400
        assert response.get_json()['error'] == 'Invalid email or password'


class TestTokenRequired:

    def test_missing_token_is_401(self, client):
        response = client.get('/api/auth/me')
        assert response.status_code == 401
        assert response.get_json()['error'] == 'Access token required'

    def test_malformed_token_is_403(self, client):
        response = client.get('/api/auth/me', headers={'Authorization': 'Bearer not.a.jwt'})
        assert response.status_code == 403
        assert response.get_json()['error'] == 'Invalid or expired token'

    def test_token_signed_with_other_secret_is_403(self, client, register):
        _, body = register()
        forged = jwt.encode({'user_id': body['user']['id']}, 'some-other-secret', algorithm='HS256')
        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {forged}'})
        assert response.status_code == 403

    def test_expired_token_is_403(self, app, client, register):
        register()
        user = User.query.filter_by(email='ada@example.com').first()
        expired = AuthService(app.config['JWT_SECRET'], ttl=timedelta(seconds=-5)).issue_token(user)
        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {expired}'})
        assert response.status_code == 403
        assert response.get_json()['error'] == 'Token expired'

    def test_token_of_unknown_user_is_403(self, app, client):
        token = jwt.encode({'user_id': 9999}, app.config['JWT_SECRET'], algorithm='HS256')
        response = client.get('/api/auth/me', headers={'Authorization': f'Bearer {token}'})
        assert response.status_code == 403


class TestProfile:

    def test_me_includes_profile_fields(self, client, register):
        headers, _ = register(phone='+44 20 7946 0000', dateOfBirth='1815-12-10')
        user = client.get('/api/auth/me', headers=headers).get_json()['user']
        assert user['phone'] == '+44 20 7946 0000'
        assert user['dateOfBirth'] == '1815-12-10'
        assert user['createdAt']
        assert user['lastLogin']

    def test_update_profile_and_preferences(self, client, auth_headers):
        response = client.put('/api/auth/profile', headers=auth_headers, json={
            'bio': '  First programmer  ',
            'preferences': {'theme': 'dark', 'defaultLanguage': 'tsx'},
        })
        assert response.status_code == 200
        user = response.get_json()['user']
        assert user['bio'] == 'First programmer'
        assert user['preferences']['theme'] == 'dark'
        assert user['preferences']['defaultLanguage'] == 'tsx'
        assert user['preferences']['autoSave'] is True

    def test_unknown_preference_key_rejected(self, client, auth_headers):
        response = client.put('/api/auth/profile', headers=auth_headers, json={
            'preferences': {'fontSize': 18},
        })
        assert response.status_code == 400
        me = client.get('/api/auth/me', headers=auth_headers).get_json()['user']
        assert 'fontSize' not in me['preferences']

    def test_profile_requires_token(self, client):
        assert client.put('/api/auth/profile', json={'bio': 'x'}).status_code == 401
