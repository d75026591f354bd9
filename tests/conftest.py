"""
Pytest Configuration and Fixtures.

Every test gets a fresh in-memory SQLite database; factories build the
courses, quizzes, users and rewards the scenarios need.
"""

import itertools

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from eduquest.core.database import Base, get_db
from eduquest.core.security import SecurityUtils
from eduquest.models import (
    Course,
    Difficulty,
    Enrollment,
    Question,
    QuestionOption,
    QuestionType,
    Quiz,
    Reward,
    RewardType,
    User,
    UserRole,
)
from eduquest.schemas.rewards import criteria_adapter, criteria_columns


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Pure engine tests")
    config.addinivalue_line("markers", "integration: Service tests against SQLite")
    config.addinivalue_line("markers", "api: HTTP tests through the FastAPI app")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "api" in path:
            item.add_marker(pytest.mark.api)


@pytest.fixture
def engine():
    import eduquest.models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )()
    try:
        yield session
    finally:
        session.close()


class Factory:
    """Builds persisted test records"""

    _counter = itertools.count(1)

    def __init__(self, db):
        self.db = db

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        return obj

    def user(self, role=UserRole.STUDENT, **kwargs) -> User:
        n = next(self._counter)
        kwargs.setdefault("name", f"Learner {n}")
        kwargs.setdefault("email", f"learner{n}@example.com")
        return self._save(User(role=role, **kwargs))

    def course(self, lessons_per_unit=(2, 2), title="Algebra Basics", creator=None) -> Course:
        course = Course(title=title, created_by=creator.id if creator else None)
        for unit_index, lesson_count in enumerate(lessons_per_unit):
            course.add_unit(f"Unit {unit_index + 1}")
            for lesson_index in range(lesson_count):
                course.add_lesson(unit_index, f"Lesson {unit_index + 1}.{lesson_index + 1}")
        return self._save(course)

    def enroll(self, user: User, course: Course) -> Enrollment:
        enrollment = Enrollment(course_id=course.id)
        user.enrollments.append(enrollment)
        self.db.commit()
        return enrollment

    @staticmethod
    def single_select(prompt="Pick A", points=10, difficulty=Difficulty.EASY, correct=0) -> Question:
        question = Question(
            prompt=prompt,
            question_type=QuestionType.SINGLE_SELECT,
            points=points,
            difficulty=difficulty,
        )
        for index, text in enumerate(("A", "B", "C")):
            question.options.append(QuestionOption(text=text, is_correct=index == correct))
        return question

    @staticmethod
    def short_answer(prompt="Capital of France?", answer="Paris", points=5,
                     difficulty=Difficulty.MEDIUM) -> Question:
        return Question(
            prompt=prompt,
            question_type=QuestionType.SHORT_ANSWER,
            points=points,
            difficulty=difficulty,
            correct_answer=answer,
        )

    def quiz(self, course=None, questions=None, **kwargs) -> Quiz:
        kwargs.setdefault("title", "Quiz One")
        kwargs.setdefault("passing_score", 60)
        kwargs.setdefault("difficulty", Difficulty.EASY)
        quiz = Quiz(course_id=course.id if course else None, **kwargs)
        for question in questions or []:
            quiz.questions.append(question)
        return self._save(quiz)

    def reward(self, criteria: dict, name="Star Badge", **kwargs) -> Reward:
        kwargs.setdefault("reward_type", RewardType.BADGE)
        kwargs.setdefault("image_url", "https://example.com/badge.png")
        columns = criteria_columns(criteria_adapter.validate_python(criteria))
        return self._save(Reward(name=name, description=name, **columns, **kwargs))

    @staticmethod
    def correct_option_id(question: Question) -> str:
        return str(next(option.id for option in question.options if option.is_correct))

    @staticmethod
    def wrong_option_id(question: Question) -> str:
        return str(next(option.id for option in question.options if not option.is_correct))


@pytest.fixture
def factory(db_session):
    return Factory(db_session)


@pytest.fixture
def student(factory):
    return factory.user()


@pytest.fixture
def teacher(factory):
    return factory.user(role=UserRole.TEACHER)


@pytest.fixture
def client(db_session):
    from eduquest.main import app

    app.dependency_overrides[get_db] = lambda: db_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = SecurityUtils.create_access_token({"sub": str(user.id), "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers
