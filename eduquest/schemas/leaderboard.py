"""Leaderboard schemas"""

from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    name: str
    points: int
    level: int
