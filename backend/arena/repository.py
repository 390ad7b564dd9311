"""Storage access for users and game sessions.

Services talk to a ``Repository`` rather than to the ORM directly so the
storage engine can be swapped (or faked in tests). The SQLAlchemy
implementation relies on the unique constraints of the ``user`` table for
registration atomicity: an application-level lookup before insert is only a
fast path for friendly errors.
"""

import abc
from typing import List, Optional, Tuple

from sqlalchemy import case, func, or_
from sqlalchemy.exc import IntegrityError

from arena.errors import DuplicateError
from arena.models import GameSession, User


class Repository(abc.ABC):

    @abc.abstractmethod
    def find_user_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        ...

    @abc.abstractmethod
    def find_user_by_email(self, email: str) -> Optional[User]:
        ...

    @abc.abstractmethod
    def find_user_by_id(self, user_id: str) -> Optional[User]:
        ...

    @abc.abstractmethod
    def create_user(self, username: str, email: str, password_hash: str) -> User:
        """Insert a user; raises DuplicateError on a unique-field collision."""

    @abc.abstractmethod
    def create_game_session(self, user_id: str, score: int, wave_reached: int, duration: int) -> GameSession:
        ...

    @abc.abstractmethod
    def list_sessions_by_user(self, user_id: str, limit: Optional[int] = None) -> List[GameSession]:
        """Sessions owned by user_id, most recent first."""

    @abc.abstractmethod
    def summarize_sessions_by_user(self, user_id: str) -> Tuple[int, int, int, int]:
        """(count, max score, max wave, total duration) over all of a user's sessions."""

    @abc.abstractmethod
    def list_top_sessions(self, limit: int) -> List[Tuple[GameSession, str]]:
        """(session, username) pairs by score desc, then earliest first."""


class SqlAlchemyRepository(Repository):
    """Repository backed by the Flask-SQLAlchemy session."""

    def __init__(self, db):
        self.db = db

    def find_user_by_email_or_username(self, email, username):
        # An email match outranks a username match held by another user
        return (
            User.query.filter(or_(User.email == email, User.username == username))
            .order_by(case((User.email == email, 0), else_=1))
            .first()
        )

    def find_user_by_email(self, email):
        return User.query.filter_by(email=email).first()

    def find_user_by_id(self, user_id):
        return self.db.session.get(User, user_id)

    def create_user(self, username, email, password_hash):
        user = User(username=username, email=email, password_hash=password_hash)
        self.db.session.add(user)
        try:
            self.db.session.commit()
        except IntegrityError:
            self.db.session.rollback()
            # Another registration won the race; report which field it took
            if User.query.filter_by(email=email).first() is not None:
                raise DuplicateError('email')
            if User.query.filter_by(username=username).first() is not None:
                raise DuplicateError('username')
            raise
        return user

    def create_game_session(self, user_id, score, wave_reached, duration):
        session = GameSession(
            user_id=user_id,
            score=score,
            wave_reached=wave_reached,
            duration=duration,
        )
        self.db.session.add(session)
        self.db.session.commit()
        return session

    def list_sessions_by_user(self, user_id, limit=None):
        query = GameSession.query.filter_by(user_id=user_id).order_by(
            GameSession.created_at.desc(), GameSession.id.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def summarize_sessions_by_user(self, user_id):
        count, high_score, best_wave, play_time = (
            self.db.session.query(
                func.count(GameSession.id),
                func.coalesce(func.max(GameSession.score), 0),
                func.coalesce(func.max(GameSession.wave_reached), 0),
                func.coalesce(func.sum(GameSession.duration), 0),
            )
            .filter(GameSession.user_id == user_id)
            .one()
        )
        return int(count), int(high_score), int(best_wave), int(play_time)

    def list_top_sessions(self, limit):
        rows = (
            self.db.session.query(GameSession, User.username)
            .join(User, GameSession.user_id == User.id)
            .order_by(
                GameSession.score.desc(),
                GameSession.created_at.asc(),
                GameSession.id.asc(),
            )
            .limit(limit)
            .all()
        )
        return [(session, username) for session, username in rows]
