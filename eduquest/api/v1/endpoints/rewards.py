"""
Reward endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eduquest.core.database import get_db
from eduquest.core.security import get_current_active_user, require_teacher
from eduquest.models import User
from eduquest.schemas.rewards import (
    AwardRewardRequest,
    RewardAwardResponse,
    RewardCreate,
    RewardResponse,
    UserRewardsResponse,
)
from eduquest.services.rewards import RewardService

router = APIRouter()


@router.get("/me", response_model=UserRewardsResponse)
def get_my_rewards(current_user: User = Depends(get_current_active_user)):
    """Rewards earned by the current user, with points and level"""
    data = RewardService.get_user_rewards(current_user)
    return UserRewardsResponse(
        rewards=[RewardResponse.model_validate(reward) for reward in data["rewards"]],
        points=data["points"],
        level=data["level"],
    )


@router.post("", response_model=RewardResponse, status_code=status.HTTP_201_CREATED)
def create_reward(
    reward_data: RewardCreate,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    """Create a reward definition (teachers and admins only)"""
    return RewardService(db).create_reward(reward_data, current_user)


@router.post("/{reward_id}/award/{user_id}", response_model=RewardAwardResponse)
def award_reward(
    reward_id: int,
    user_id: int,
    request: Optional[AwardRewardRequest] = None,
    current_user: User = Depends(require_teacher),
    db: Session = Depends(get_db),
):
    """Manually award a reward to a user (teachers and admins only)"""
    reward = RewardService(db).award_reward_manually(
        reward_id, user_id, current_user, request.reason if request else None
    )
    award = next(a for a in reward.awarded_to if a.user_id == user_id)
    return RewardAwardResponse(
        reward=RewardResponse.model_validate(reward),
        user_id=user_id,
        awarded_at=award.awarded_at,
        reason=award.reason,
    )
