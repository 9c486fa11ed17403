import pytest

from component_studio.config import config
from component_studio.config.settings import TestingConfig
from component_studio.extensions import limiter
from component_studio.factory import create_app


class RateLimitedConfig(TestingConfig):
    RATELIMIT_ENABLED = True
    RATELIMIT_API = '2 per minute'


@pytest.fixture
def limited_client(monkeypatch):
    """Client for an app whose API allows two requests per minute."""
    monkeypatch.setitem(config, 'rate_limited', RateLimitedConfig)
    # The limiter instance is shared by every app built in this process
    previous = limiter.enabled
    yield create_app('rate_limited').test_client()
    limiter.enabled = previous


@pytest.mark.smoke
def test_third_request_is_rejected_with_json(limited_client):
    statuses = [limited_client.get('/api/health').status_code for _ in range(3)]
    assert statuses == [200, 200, 429]

    response = limited_client.get('/api/health')
    assert response.status_code == 429
    data = response.get_json()
    assert data['error'] == 'Too many requests from this IP, please try again later.'
    assert data['status_code'] == 429
    assert data['path'] == '/api/health'
    assert data['error_id']


@pytest.mark.smoke
def test_api_blueprints_share_one_window(limited_client):
    assert limited_client.get('/api/health').status_code == 200
    assert limited_client.get('/api/shared/missing-token').status_code == 404
    assert limited_client.get('/api/auth/me').status_code == 429
    assert limited_client.post('/api/generate', json={'prompt': 'x'}).status_code == 429


@pytest.mark.smoke
def test_root_health_is_not_limited(limited_client):
    for _ in range(3):
        limited_client.get('/api/health')
    assert limited_client.get('/health').status_code == 200
