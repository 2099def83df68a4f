import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_HASH_ITERATIONS", "1000")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from loandesk import models  # noqa: F401
from loandesk.database import Base, get_db
from loandesk.models.user import User
from loandesk.utils.security import create_access_token, hash_password
from main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    def _make_user(name, role="employee", is_active=True, password="password123"):
        user = User(
            name=name,
            email=f"{name.lower()}@loandesk.in",
            hashed_password=hash_password(password),
            department="Operations",
            role=role,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def users(make_user):
    """Alice and Bob are managers, Carol and Dave are employees. No reporting lines yet."""
    return {
        "alice": make_user("Alice", role="manager"),
        "bob": make_user("Bob", role="manager"),
        "carol": make_user("Carol"),
        "dave": make_user("Dave"),
    }


@pytest.fixture()
def admin(make_user):
    return make_user("Admin", role="admin")


def auth_headers(user):
    token = create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}
