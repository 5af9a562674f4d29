import itertools
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["EMAIL_USE_CELERY"] = "false"
os.environ["SMTP_SERVER"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from projecthub import auth, crud, models, schemas
from projecthub.database import Base, get_db
from projecthub.main import app


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make_user(email=None, password="password123"):
        n = next(counter)
        return crud.create_user(
            db,
            email=email or f"user{n}@example.com",
            hashed_password=auth.hash_password(password),
            first_name="Test",
            last_name=f"User{n}",
        )

    return _make_user


@pytest.fixture
def owner(make_user):
    return make_user(email="owner@example.com")


@pytest.fixture
def project(db, owner):
    return crud.create_project_with_owner(db, owner.id, {"name": "Apollo", "description": "Moon shot"})


@pytest.fixture
def add_member(db):
    """Attach ``user`` to ``project`` with the given role, ACTIVE by default."""

    def _add_member(project, user, role=models.Role.MEMBER, status=models.MemberStatus.ACTIVE):
        member = models.ProjectMember(
            project_id=project.id,
            user_id=user.id,
            role=role,
            status=status,
            joined_at=crud.utcnow() if status == models.MemberStatus.ACTIVE else None,
        )
        db.add(member)
        db.commit()
        db.refresh(member)
        return member

    return _add_member


@pytest.fixture
def task(db, project):
    return crud.create_task(db, project.id, {"description": "Write the brief", "priority": models.Priority.HIGH})


def auth_headers(user):
    return {"Authorization": f"Bearer {auth.create_access_token(user.id)}"}


def new_task(description="Write the brief", priority=models.Priority.MEDIUM, **kwargs):
    return schemas.TaskCreate(description=description, priority=priority, **kwargs)
