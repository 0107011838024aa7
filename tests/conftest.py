import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
os.environ.setdefault("GRADEBOOK_DATABASE_URL", "sqlite:///:memory:")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gradebook.api.auth import create_token
from gradebook.api.deps import get_submission_service
from gradebook.db import Base, get_db
from gradebook.main import app
from gradebook.models import Course, CourseStatus, Enrollment, User, UserRole
from gradebook.repositories import (
    SqlAlchemyAssignmentRepository,
    SqlAlchemyDirectory,
    SqlAlchemySubmissionRepository,
)
from gradebook.services.submissions import SubmissionService
from gradebook.utils.storage import LocalFileStorage

# Use in-memory SQLite for testing to ensure isolation
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """可手动拨动的时钟。"""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture(scope="function")
def session():
    """
    Create a fresh database session for each test.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def upload_root(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture(scope="function")
def client(session, upload_root):
    """
    Create a TestClient that uses the test session and a temporary upload directory.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass

    def override_submission_service():
        return SubmissionService(
            SqlAlchemyAssignmentRepository(session),
            SqlAlchemySubmissionRepository(session),
            SqlAlchemyDirectory(session),
            storage=LocalFileStorage(upload_root),
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_submission_service] = override_submission_service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_user(session):
    def _make(username: str, role: UserRole = UserRole.STUDENT) -> User:
        user = User(username=username, role=role, name=username.title())
        session.add(user)
        session.commit()
        return user

    return _make


@pytest.fixture
def teacher(make_user):
    return make_user("teacher1", UserRole.TEACHER)


@pytest.fixture
def student(make_user):
    return make_user("student1")


@pytest.fixture
def course(session, teacher):
    course = Course(name="Algebra", teacher_id=teacher.id, status=CourseStatus.ACTIVE)
    session.add(course)
    session.commit()
    return course


@pytest.fixture
def enroll(session):
    def _enroll(student: User, course: Course) -> Enrollment:
        enrollment = Enrollment(course_id=course.id, student_id=student.id)
        session.add(enrollment)
        session.commit()
        return enrollment

    return _enroll


@pytest.fixture
def enrolled_student(student, course, enroll):
    enroll(student, course)
    return student


@pytest.fixture
def stores(session):
    return (
        SqlAlchemyAssignmentRepository(session),
        SqlAlchemySubmissionRepository(session),
        SqlAlchemyDirectory(session),
    )


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        return {"Authorization": f"Bearer {create_token(user.id, user.role.value)}"}

    return _headers
