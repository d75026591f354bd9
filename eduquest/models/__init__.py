"""
EduQuest Models Package
"""

from eduquest.models.quiz import (
    Quiz, Question, QuestionOption, AdaptiveRule,
    Difficulty, QuestionType, NextAction
)
from eduquest.models.course import Course, CourseUnit, Lesson, LessonCompletion
from eduquest.models.user import (
    User, UserRole, Enrollment, ActivityLogEntry,
    LearningStyle, LearningApproach
)
from eduquest.models.reward import (
    Reward, RewardAward, RewardType, Rarity, RewardCategory, CriteriaType
)
from eduquest.models.attempt import Attempt, AttemptAnswer

__all__ = [
    "Quiz", "Question", "QuestionOption", "AdaptiveRule",
    "Difficulty", "QuestionType", "NextAction",
    "Course", "CourseUnit", "Lesson", "LessonCompletion",
    "User", "UserRole", "Enrollment", "ActivityLogEntry",
    "LearningStyle", "LearningApproach",
    "Reward", "RewardAward", "RewardType", "Rarity", "RewardCategory", "CriteriaType",
    "Attempt", "AttemptAnswer",
]
