"""
Reward models for EduQuest
"""

import enum
from datetime import datetime

from sqlalchemy import (
    Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from eduquest.core.database import Base
from eduquest.models.types import enum_column


class RewardType(str, enum.Enum):
    BADGE = "badge"
    CERTIFICATE = "certificate"
    VIRTUAL_ITEM = "virtual-item"
    LEVEL_UP = "level-up"
    POINTS = "points"


class Rarity(str, enum.Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"


class RewardCategory(str, enum.Enum):
    ACHIEVEMENT = "achievement"
    COMPLETION = "completion"
    MILESTONE = "milestone"
    SPECIAL = "special"
    SEASONAL = "seasonal"


class CriteriaType(str, enum.Enum):
    """Kinds of condition that make a reward eligible"""
    COURSE_COMPLETION = "course-completion"
    QUIZ_SCORE = "quiz-score"
    STREAK = "streak"
    TIME_SPENT = "time-spent"
    POINTS_EARNED = "points-earned"
    CUSTOM = "custom"


class Reward(Base):
    """
    Reward definition

    Criteria parameters live in their own columns so candidate rewards can be
    selected with plain queries; `criteria` rebuilds the typed variant.
    """
    __tablename__ = "rewards"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    reward_type = Column(enum_column(RewardType), nullable=False)
    image_url = Column(String(500), nullable=True)
    value = Column(Integer, default=0, nullable=False)  # points credited on award
    rarity = Column(enum_column(Rarity), default=Rarity.COMMON, nullable=False)
    category = Column(enum_column(RewardCategory), default=RewardCategory.ACHIEVEMENT, nullable=False)

    # Criteria
    criteria_type = Column(enum_column(CriteriaType), nullable=False, index=True)
    threshold = Column(Float, nullable=True)
    quiz_id = Column(Integer, ForeignKey("quizzes.id"), nullable=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=True, index=True)
    custom_rule = Column(Text, nullable=True)

    is_limited = Column(Boolean, default=False, nullable=False)
    limited_quantity = Column(Integer, nullable=True)
    awarded_count = Column(Integer, default=0, nullable=False)
    expires_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    # Optimistic concurrency counter
    version_id = Column(Integer, nullable=False)

    awarded_to = relationship(
        "RewardAward",
        back_populates="reward",
        order_by="RewardAward.id",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version_id}

    @property
    def criteria(self):
        from eduquest.schemas.rewards import criteria_from_model

        return criteria_from_model(self)

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def is_sold_out(self) -> bool:
        return self.is_limited and (self.awarded_count or 0) >= (self.limited_quantity or 0)

    def __repr__(self):
        return f"<Reward(id={self.id}, name={self.name!r}, criteria={self.criteria_type})>"


class RewardAward(Base):
    """Record of a reward granted to one learner"""
    __tablename__ = "reward_awards"

    id = Column(Integer, primary_key=True)
    reward_id = Column(Integer, ForeignKey("rewards.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    awarded_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    awarded_at = Column(DateTime, nullable=False)
    reason = Column(Text, nullable=True)

    reward = relationship("Reward", back_populates="awarded_to")

    __table_args__ = (
        UniqueConstraint("reward_id", "user_id", name="uq_reward_award_reward_user"),
    )
