import sys
from pathlib import Path

# Ensure the application package under src/ is importable when running tests
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / 'src'
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

import pytest

from component_studio.factory import create_app
from component_studio.extensions import db as _db
from component_studio.services.openrouter_client import OpenRouterClient


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for the tests."""
    app = create_app('testing')
    app.config.update({
        'UPLOAD_FOLDER': str(tmp_path_factory.mktemp('uploads')),
    })

    with app.app_context():
        _db.create_all()
        yield app
        _db.drop_all()


@pytest.fixture(autouse=True)
def _clean_tables(request):
    """Empty every table after tests that touched the database."""
    yield
    if 'app' not in request.fixturenames:
        return
    _db.session.rollback()
    for table in reversed(_db.metadata.sorted_tables):
        _db.session.execute(table.delete())
    _db.session.commit()
    # Requests reuse the session-wide app context (and so its db.session);
    # drop objects left in the identity map by the bulk deletes above.
    _db.session.expunge_all()


@pytest.fixture(scope='function')
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def register(client):
    """Register a user and return ``(headers, body)``."""
    def _register(email='ada@example.com', password='secret123', name='Ada Lovelace', **extra):
        response = client.post('/api/auth/register', json={
            'email': email, 'password': password, 'name': name, **extra,
        })
        assert response.status_code == 201, response.get_json()
        body = response.get_json()
        return {'Authorization': f"Bearer {body['token']}"}, body
    return _register


@pytest.fixture
def auth_headers(register):
    headers, _ = register()
    return headers


def completion(content, total_tokens=42):
    """OpenRouter-shaped success body."""
    return {
        'id': 'gen-test',
        'choices': [{'message': {'role': 'assistant', 'content': content}}],
        'usage': {'prompt_tokens': 10, 'completion_tokens': total_tokens - 10, 'total_tokens': total_tokens},
    }


class FakeOpenRouter:
    """Stands in for the network call and records what would have been sent."""

    def __init__(self):
        self.calls = []
        self.reply = (True, completion('Here you go.\n{"jsx": "function C(){return null;}"}'), 200)

    def respond_with(self, content, total_tokens=42):
        self.reply = (True, completion(content, total_tokens), 200)

    def fail_with(self, status, error='upstream said no'):
        self.reply = (False, {'error': error}, status)


@pytest.fixture
def fake_openrouter(monkeypatch):
    fake = FakeOpenRouter()

    async def _chat_completion(client, model, messages):
        fake.calls.append({
            'model': model,
            'messages': messages,
            'headers': client._headers(),
            'payload': client._payload(model, messages),
        })
        return fake.reply

    monkeypatch.setattr(OpenRouterClient, 'chat_completion', _chat_completion)
    return fake
