"""
API v1 main router
Combines all v1 endpoint routers
"""

from fastapi import APIRouter

from eduquest.api.v1.endpoints import attempts, courses, health, leaderboard, rewards

api_router = APIRouter()

# Include all endpoint routers
api_router.include_router(health.router, tags=["Health"])
api_router.include_router(attempts.router, prefix="/attempts", tags=["Attempts"])
api_router.include_router(courses.router, prefix="/courses", tags=["Courses"])
api_router.include_router(rewards.router, prefix="/rewards", tags=["Rewards"])
api_router.include_router(leaderboard.router, prefix="/leaderboard", tags=["Leaderboard"])
