"""Course, enrollment and progress schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from eduquest.schemas.rewards import RewardResponse


class EnrollmentResponse(BaseModel):
    course_id: int
    progress: int
    is_completed: bool
    enrolled_at: Optional[datetime]

    class Config:
        from_attributes = True


class LessonProgressUpdate(BaseModel):
    lesson_id: int
    completed: bool = True


class CourseProgressResponse(BaseModel):
    course_id: int
    completed_lessons: List[int]
    progress_percentage: int
    is_completed: bool
    total_lessons: int
    points: int
    level: int


class LessonProgressResponse(CourseProgressResponse):
    points_awarded: int = 0
    rewards_awarded: List[RewardResponse] = Field(default_factory=list)


class UnitCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class UnitResponse(BaseModel):
    id: int
    course_id: int
    position: int
    title: str
    description: Optional[str]

    class Config:
        from_attributes = True


class LessonCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = ""
    duration: int = Field(15, ge=1)


class LessonResponse(BaseModel):
    id: int
    unit_id: int
    position: int
    title: str
    content: str
    duration: int

    class Config:
        from_attributes = True
