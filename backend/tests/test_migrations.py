import pytest
import sqlalchemy as sa
from flask_migrate import downgrade, upgrade

from arena import create_app, db
from arena.errors import DuplicateError


@pytest.fixture()
def file_app(tmp_path):
    from conftest import TestConfig

    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'arena.db'}"

    return create_app(FileConfig)


def test_upgrade_builds_the_model_schema(file_app):
    with file_app.app_context():
        upgrade()
        insp = sa.inspect(db.engine)
        assert {'user', 'game_session', 'alembic_version'} <= set(insp.get_table_names())

        unique = {ix['name'] for ix in insp.get_indexes('user') if ix['unique']}
        assert unique == {'ix_user_username', 'ix_user_email'}

        cols = {c['name'] for c in insp.get_columns('game_session')}
        assert cols == {'id', 'user_id', 'score', 'wave_reached', 'duration', 'created_at'}


def test_migrated_schema_enforces_unique_email(file_app):
    with file_app.app_context():
        upgrade()
        credentials = file_app.extensions['arena']['credentials']
        credentials.register('alice', 'a@x.com', 'secret1')
        repository = file_app.extensions['arena']['repository']
        with pytest.raises(DuplicateError) as excinfo:
            repository.create_user('alice2', 'a@x.com', 'hash')
        assert excinfo.value.field == 'email'


def test_downgrade_to_base_drops_tables(file_app):
    with file_app.app_context():
        upgrade()
        downgrade(revision='base')
        names = set(sa.inspect(db.engine).get_table_names())
        assert 'user' not in names and 'game_session' not in names
