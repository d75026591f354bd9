"""
Reward schemas

Reward criteria are a tagged variant per kind. Each variant declares its own
required parameters, so an incomplete definition fails at construction.
"""

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from eduquest.models.reward import CriteriaType, Rarity, RewardCategory, RewardType


class _Criteria(BaseModel):
    model_config = ConfigDict(extra="forbid")


class QuizScoreCriteria(_Criteria):
    type: Literal["quiz-score"] = "quiz-score"
    quiz_id: int
    threshold: float = Field(..., ge=0, le=100)


class CourseCompletionCriteria(_Criteria):
    type: Literal["course-completion"] = "course-completion"
    course_id: int
    threshold: float = Field(100, ge=0, le=100)


class PointsEarnedCriteria(_Criteria):
    type: Literal["points-earned"] = "points-earned"
    threshold: float = Field(..., ge=0)


class StreakCriteria(_Criteria):
    type: Literal["streak"] = "streak"
    threshold: float = Field(..., ge=1)


class TimeSpentCriteria(_Criteria):
    type: Literal["time-spent"] = "time-spent"
    threshold: float = Field(..., ge=0)


class CustomCriteria(_Criteria):
    type: Literal["custom"] = "custom"
    custom_rule: str = Field(..., min_length=1)


RewardCriteria = Annotated[
    Union[
        QuizScoreCriteria,
        CourseCompletionCriteria,
        PointsEarnedCriteria,
        StreakCriteria,
        TimeSpentCriteria,
        CustomCriteria,
    ],
    Field(discriminator="type"),
]

criteria_adapter = TypeAdapter(RewardCriteria)

# Which Reward columns each criteria kind reads
_CRITERIA_FIELDS = {
    CriteriaType.QUIZ_SCORE: ("quiz_id", "threshold"),
    CriteriaType.COURSE_COMPLETION: ("course_id", "threshold"),
    CriteriaType.POINTS_EARNED: ("threshold",),
    CriteriaType.STREAK: ("threshold",),
    CriteriaType.TIME_SPENT: ("threshold",),
    CriteriaType.CUSTOM: ("custom_rule",),
}


def criteria_from_model(reward) -> RewardCriteria:
    """Rebuild the criteria variant from a stored Reward row"""
    kind = CriteriaType(reward.criteria_type)
    data = {"type": kind.value}
    for field in _CRITERIA_FIELDS[kind]:
        value = getattr(reward, field)
        if value is not None:
            data[field] = value
    return criteria_adapter.validate_python(data)


def criteria_columns(criteria: RewardCriteria) -> dict:
    """Flatten a criteria variant into Reward column values"""
    columns = {"criteria_type": CriteriaType(criteria.type)}
    for field in _CRITERIA_FIELDS[columns["criteria_type"]]:
        columns[field] = getattr(criteria, field)
    return columns


class RewardCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    type: RewardType
    image_url: Optional[str] = None
    value: int = Field(0, ge=0)
    rarity: Rarity = Rarity.COMMON
    category: RewardCategory = RewardCategory.ACHIEVEMENT
    criteria: RewardCriteria
    course_id: Optional[int] = None  # course whose reward pool lists this reward
    is_limited: bool = False
    limited_quantity: Optional[int] = Field(None, ge=1)
    expires_at: Optional[datetime] = None
    is_active: bool = True

    @model_validator(mode="after")
    def check_limits(self):
        if self.is_limited and self.limited_quantity is None:
            raise ValueError("limited_quantity is required for limited rewards")
        if self.type in (RewardType.BADGE, RewardType.VIRTUAL_ITEM) and not self.image_url:
            raise ValueError(f"image_url is required for {self.type.value} rewards")
        return self


class RewardResponse(BaseModel):
    id: int
    name: str
    description: str
    reward_type: RewardType
    image_url: Optional[str]
    value: int
    rarity: Rarity
    category: RewardCategory
    criteria: RewardCriteria
    is_active: bool
    is_limited: bool
    limited_quantity: Optional[int]
    expires_at: Optional[datetime]

    class Config:
        from_attributes = True


class AwardRewardRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class RewardAwardResponse(BaseModel):
    reward: RewardResponse
    user_id: int
    awarded_at: datetime
    reason: Optional[str]


class UserRewardsResponse(BaseModel):
    rewards: List[RewardResponse]
    points: int
    level: int
