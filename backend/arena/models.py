from arena import db
from datetime import datetime, timezone
import uuid


def utcnow():
    """Naive UTC timestamp; the database column carries no zone."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + 'Z'


def _new_id():
    return str(uuid.uuid4())


class User(db.Model):
    __tablename__ = 'user'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    username = db.Column(db.String(30), unique=True, nullable=False, index=True)
    email = db.Column(db.String(254), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    sessions = db.relationship('GameSession', back_populates='user', lazy='dynamic')

    def to_dict(self):
        # Public projection; password_hash never leaves the model
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'createdAt': isoformat(self.created_at),
        }


class GameSession(db.Model):
    __tablename__ = 'game_session'
    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('user.id'), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False)
    wave_reached = db.Column(db.Integer, nullable=False)
    duration = db.Column(db.Integer, nullable=False)  # seconds
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    user = db.relationship('User', back_populates='sessions')

    __table_args__ = (
        db.Index('ix_game_session_score_created', 'score', 'created_at'),
    )

    def to_dict(self, include_user_id=False):
        data = {
            'id': self.id,
            'score': self.score,
            'waveReached': self.wave_reached,
            'duration': self.duration,
            'createdAt': isoformat(self.created_at),
        }
        if include_user_id:
            data['userId'] = self.user_id
        return data
