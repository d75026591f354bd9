"""Leaderboard service"""

from typing import List

from sqlalchemy.orm import Session

from eduquest.models import LearningApproach, User, UserRole


class LeaderboardService:
    @staticmethod
    def get_leaderboard(db: Session, limit: int = 10) -> List[dict]:
        """Top students on the tailored learning approach, by points then level"""
        users = (
            db.query(User)
            .filter(
                User.role == UserRole.STUDENT,
                User.is_active.is_(True),
                User.learning_approach == LearningApproach.TAILORED,
            )
            .order_by(User.points.desc(), User.level.desc(), User.id)
            .limit(limit)
            .all()
        )

        return [
            {
                "rank": rank,
                "user_id": user.id,
                "name": user.name,
                "points": user.points,
                "level": user.level,
            }
            for rank, user in enumerate(users, start=1)
        ]
