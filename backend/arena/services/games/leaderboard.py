from dataclasses import dataclass
from datetime import datetime
from typing import List

from flask import current_app

from arena.errors import NotFound
from arena.models import isoformat
from .integrity import validate_session

LEADERBOARD_DEFAULT_LIMIT = 50
LEADERBOARD_MAX_LIMIT = 100
HISTORY_DEFAULT_LIMIT = 20
HISTORY_MAX_LIMIT = 50


def clamp_limit(limit, default: int, maximum: int) -> int:
    if not limit or limit < 1:
        return default
    return min(limit, maximum)


@dataclass
class RankedEntry:
    rank: int
    username: str
    score: int
    wave_reached: int
    duration: int
    created_at: datetime

    def to_dict(self):
        return {
            'rank': self.rank,
            'username': self.username,
            'score': self.score,
            'waveReached': self.wave_reached,
            'duration': self.duration,
            'createdAt': isoformat(self.created_at),
        }


@dataclass
class UserStats:
    total_games: int = 0
    high_score: int = 0
    best_wave: int = 0
    total_play_time: int = 0

    def to_dict(self):
        return {
            'totalGames': self.total_games,
            'highScore': self.high_score,
            'bestWave': self.best_wave,
            'totalPlayTime': self.total_play_time,
        }


class LeaderboardAggregator:
    """Persist validated sessions and read rankings back out."""

    def __init__(self, repository):
        self.repository = repository

    def create_game_session(self, user_id: str, score: int, wave_reached: int, duration: int):
        # Last gate before persistence; re-check even if the route already did
        validate_session(score, wave_reached, duration)

        if self.repository.find_user_by_id(user_id) is None:
            raise NotFound('User not found')

        session = self.repository.create_game_session(user_id, score, wave_reached, duration)
        current_app.logger.info(
            f"[session] user={user_id} id={session.id} score={score} wave={wave_reached} duration={duration}s"
        )
        return session

    def get_leaderboard(self, limit: int = LEADERBOARD_DEFAULT_LIMIT) -> List[RankedEntry]:
        limit = clamp_limit(limit, LEADERBOARD_DEFAULT_LIMIT, LEADERBOARD_MAX_LIMIT)
        rows = self.repository.list_top_sessions(limit)
        return [
            RankedEntry(
                rank=index,
                username=username,
                score=session.score,
                wave_reached=session.wave_reached,
                duration=session.duration,
                created_at=session.created_at,
            )
            for index, (session, username) in enumerate(rows, start=1)
        ]

    def get_user_game_history(self, user_id: str, limit: int = HISTORY_DEFAULT_LIMIT):
        limit = clamp_limit(limit, HISTORY_DEFAULT_LIMIT, HISTORY_MAX_LIMIT)
        return self.repository.list_sessions_by_user(user_id, limit=limit)

    def get_user_stats(self, user_id: str) -> UserStats:
        # Independent aggregates: high score and best wave may come from different sessions
        total_games, high_score, best_wave, total_play_time = self.repository.summarize_sessions_by_user(user_id)
        if not total_games:
            return UserStats()
        return UserStats(
            total_games=total_games,
            high_score=high_score,
            best_wave=best_wave,
            total_play_time=total_play_time,
        )
