"""Game domain services: session integrity checks and leaderboards.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from scoring policy.
"""

from .integrity import validate_session
from .leaderboard import LeaderboardAggregator, RankedEntry, UserStats

__all__ = ['LeaderboardAggregator', 'RankedEntry', 'UserStats', 'validate_session']
