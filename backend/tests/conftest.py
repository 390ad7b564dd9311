import os
import sys
import pytest

# Ensure the backend root (containing the `arena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from arena import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET = 'test-jwt-secret'
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_IN = '7d'
    # Keep bcrypt fast in tests
    BCRYPT_LOG_ROUNDS = 4
    BCRYPT_HANDLE_LONG_PASSWORDS = True
    CORS_ORIGINS = '*'
    PORT = 3000


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        import arena.models  # noqa: F401
        db.create_all()
    # No context stays pushed: each request gets its own, so Flask-Login
    # never reuses a previous request's identity
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_context(flask_app):
    with flask_app.app_context():
        yield flask_app


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def services(flask_app):
    return flask_app.extensions['arena']


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


def register(client, username='alice', email='a@x.com', password='secret1'):
    return client.post('/auth/register', json={
        'username': username,
        'email': email,
        'password': password,
    })


def auth_header(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture()
def alice(client):
    res = register(client)
    assert res.status_code == 201
    return res.get_json()


def tamper_signature(token):
    """Swap the first signature character for another valid base64url one."""
    header, payload, signature = token.split('.')
    first = 'A' if signature[0] != 'A' else 'B'
    return '.'.join([header, payload, first + signature[1:]])
