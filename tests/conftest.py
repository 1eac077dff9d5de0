import os
import tempfile
from datetime import datetime, timedelta, timezone

TEST_DB_FILE = "test_classhub.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# config is read at import time, so point it at throwaway locations first
os.environ["CLASSHUB_DATABASE_URL"] = TEST_DB_URL
os.environ["CLASSHUB_UPLOAD_DIR"] = tempfile.mkdtemp(prefix="classhub-uploads-")
os.environ.pop("CLASSHUB_SMTP_USER", None)
os.environ.pop("CLASSHUB_SMTP_PASSWORD", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from classhub.core import config  # noqa: E402
from classhub.core.deps import get_db  # noqa: E402
from classhub.core.security import create_access_token, hash_password  # noqa: E402
from classhub.db.base_class import Base  # noqa: E402
from classhub.main import app  # noqa: E402
from classhub.models.assignment import Assignment  # noqa: E402
from classhub.models.attachment import Attachment  # noqa: E402
from classhub.models.classroom import Classroom  # noqa: E402
from classhub.models.comment import Comment  # noqa: E402
from classhub.models.enrollment import Enrollment  # noqa: E402
from classhub.models.submission import Submission  # noqa: E402
from classhub.models.user import User  # noqa: E402

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "password123"
# bcrypt is slow; hash once for every seeded user
PASSWORD_HASH = hash_password(PASSWORD)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def auth_header(user_id: int) -> dict:
    token = create_access_token({"sub": str(user_id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(config, "UPLOAD_DIR", path)
    return path


@pytest.fixture(autouse=True)
def seed():
    """Seed a clean minimal dataset for each test.

    One classroom owned by ``teacher`` with ``student`` enrolled and
    ``outsider`` not enrolled, plus one open assignment due tomorrow.
    """
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        for model in (Comment, Attachment, Submission, Assignment, Enrollment, Classroom, User):
            db.query(model).delete()
        db.commit()

        teacher = User(email="teacher1@example.com", full_name="Teacher One", role="teacher", hashed_password=PASSWORD_HASH)
        other_teacher = User(email="teacher2@example.com", full_name="Teacher Two", role="teacher", hashed_password=PASSWORD_HASH)
        student = User(email="student1@example.com", full_name="Student One", role="student", hashed_password=PASSWORD_HASH)
        outsider = User(email="student2@example.com", full_name="Student Two", role="student", hashed_password=PASSWORD_HASH)
        db.add_all([teacher, other_teacher, student, outsider])
        db.commit()

        classroom = Classroom(name="Biology 101", subject="Biology", code="ABC123", teacher_id=teacher.id)
        db.add(classroom)
        db.commit()

        db.add(Enrollment(classroom_id=classroom.id, student_id=student.id))
        assignment = Assignment(
            classroom_id=classroom.id,
            teacher_id=teacher.id,
            title="HW1",
            description="Read chapter 1",
            due_date=datetime.now(timezone.utc) + timedelta(days=1),
            points=100,
            is_published=True,
            collect_submissions=True,
        )
        db.add(assignment)
        db.commit()

        ids = {
            "teacher": teacher.id,
            "other_teacher": other_teacher.id,
            "student": student.id,
            "outsider": outsider.id,
            "classroom": classroom.id,
            "assignment": assignment.id,
        }
        yield ids
    finally:
        db.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def teacher_headers(seed):
    return auth_header(seed["teacher"])


@pytest.fixture()
def other_teacher_headers(seed):
    return auth_header(seed["other_teacher"])


@pytest.fixture()
def student_headers(seed):
    return auth_header(seed["student"])


@pytest.fixture()
def outsider_headers(seed):
    return auth_header(seed["outsider"])
