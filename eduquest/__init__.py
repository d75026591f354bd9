"""EduQuest: quiz attempt evaluation and gamification backend"""

__version__ = "1.0.0"
