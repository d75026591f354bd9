"""
Leaderboard endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from eduquest.core.config import settings
from eduquest.core.database import get_db
from eduquest.schemas.leaderboard import LeaderboardEntry
from eduquest.services.leaderboard import LeaderboardService

router = APIRouter()


@router.get("", response_model=List[LeaderboardEntry])
def get_leaderboard(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Top students by points, then level"""
    return LeaderboardService.get_leaderboard(db, limit or settings.LEADERBOARD_LIMIT)
