from flask import Flask, current_app, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
from werkzeug.exceptions import HTTPException
import click
import os
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'migrations')


def _cors_origins(raw):
    if not raw or raw == '*':
        return '*'
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    # Tokens cannot be issued or checked without a secret: refuse to start
    if not flask_app.config.get('JWT_SECRET'):
        raise RuntimeError('JWT_SECRET is not defined')

    origins = _cors_origins(flask_app.config.get('CORS_ORIGINS'))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db, directory=MIGRATIONS_DIR)
    CORS(flask_app, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    # Services are built once per app and shared by reference
    from arena.repository import SqlAlchemyRepository
    from arena.services.auth import BcryptPasswordHasher, CredentialManager, JoseTokenSigner, parse_ttl
    from arena.services.games import LeaderboardAggregator

    repository = SqlAlchemyRepository(db)
    signer = JoseTokenSigner(
        flask_app.config['JWT_SECRET'],
        algorithm=flask_app.config.get('JWT_ALGORITHM', 'HS256'),
        ttl=parse_ttl(flask_app.config.get('JWT_EXPIRES_IN')),
    )
    flask_app.extensions['arena'] = {
        'repository': repository,
        'credentials': CredentialManager(repository, BcryptPasswordHasher(bcrypt), signer),
        'leaderboard': LeaderboardAggregator(repository),
    }

    from arena.main import main
    flask_app.register_blueprint(main)

    from arena.api.auth import auth
    flask_app.register_blueprint(auth, url_prefix='/auth')

    from arena.api.games import games
    flask_app.register_blueprint(games, url_prefix='/game')

    from arena.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    _register_error_handlers(flask_app)

    # Bearer tokens replace cookie sessions: identity comes from the request
    from arena.errors import AuthError
    from arena.services.auth import TokenIdentity

    @login_manager.request_loader
    def load_identity(request):
        header = request.headers.get('Authorization', '')
        scheme, _, token = header.partition(' ')
        if scheme.lower() != 'bearer' or not token.strip():
            return None
        try:
            user_id = current_app.extensions['arena']['credentials'].verify(token.strip())
        except AuthError as exc:
            current_app.logger.info(f"[auth-rejected] reason={exc.code}")
            return None
        return TokenIdentity(user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Unauthorized', 'code': 'unauthorized'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database tables."""
        import arena.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app


def _register_error_handlers(flask_app):
    from arena.errors import ArenaError

    @flask_app.errorhandler(ArenaError)
    def handle_arena_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {exc.code}: {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(exc):
        if exc.code == 404:
            return jsonify({'error': 'Route not found'}), 404
        return jsonify({'error': exc.description}), exc.code

    @flask_app.errorhandler(Exception)
    def handle_unexpected(exc):
        flask_app.logger.exception(f"[error] unhandled {type(exc).__name__}")
        return jsonify({'error': 'Internal server error', 'code': 'internal_error'}), 500
