"""
Shared fixtures: an in-memory SQLite database wired into the app through
dependency overrides, plus logged-in admin and student users.
"""
import pytest
import fitz
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import certportal.db.models  # noqa: F401
from certportal.main import app
from certportal.core.auth_dependency import get_db
from certportal.core.security import hash_password, create_access_token
from certportal.db.base import Base
from certportal.db.models.student import Student
from certportal.db.models.user import User, UserRole
from certportal.db.session import make_engine


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = make_engine(TEST_DATABASE_URL, poolclass=StaticPool)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "adminpass123"
STUDENT_EMAIL = "student@example.com"
STUDENT_PASSWORD = "studentpass123"


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def admin_user(db):
    user = User(email=ADMIN_EMAIL, password_hash=hash_password(ADMIN_PASSWORD), role=UserRole.ADMIN.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_headers(admin_user):
    token = create_access_token({"sub": admin_user.email, "role": admin_user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def student(db):
    row = Student(name="Priya Sharma", phone="9876543210", year=2024, branch="Computer Science")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


@pytest.fixture
def student_user(db, student):
    user = User(
        email=STUDENT_EMAIL,
        password_hash=hash_password(STUDENT_PASSWORD),
        role=UserRole.STUDENT.value,
        student_id=student.id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def student_headers(student_user):
    token = create_access_token({"sub": student_user.email, "role": student_user.role})
    return {"Authorization": f"Bearer {token}"}


def make_png(width: int = 40, height: int = 20) -> bytes:
    """A small solid-colour PNG."""
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, width, height), False)
    pix.clear_with(200)
    return pix.tobytes("png")


@pytest.fixture
def png_bytes():
    return make_png()
