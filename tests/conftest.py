"""Shared fixtures: in-memory SQLite, seeded roles, users and tokens."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from estate_backend.core.security import issue_token
from estate_backend.db.base import Base
from estate_backend.db.seeds.seed_roles import seed_roles
from estate_backend.db.session import SessionLocal, engine
from estate_backend.main import app
from estate_backend.models.role import Role
from estate_backend.models.user import UserStatusEnum
from estate_backend.services.auth_service import auth_service
from estate_backend.services.principal_service import principal_service

PASSWORD = "secret123"


@pytest.fixture
def db():
    """Fresh schema with the system roles seeded."""
    import estate_backend.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    seed_roles(session)
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def make_user(db):
    """Factory creating a user with the given role and status."""
    counter = {"n": 0}

    def _make(role="customer", status=UserStatusEnum.active, permissions=None, email=None):
        counter["n"] += 1
        return auth_service.create_user(
            db,
            email=email or f"{role}{counter['n']}@example.com",
            password=PASSWORD,
            full_name=f"{role.title()} User",
            role_name=role,
            status=status,
            role_permissions=permissions,
        )

    return _make


@pytest.fixture
def make_role(db):
    """Factory inserting a custom role row directly."""

    def _make(name, level=1, permissions=(), pages=(), is_active=True):
        role = Role(
            name=name,
            description=f"{name} role",
            level=level,
            permissions=list(permissions),
            pages=list(pages),
            is_active=is_active,
        )
        db.add(role)
        db.commit()
        db.refresh(role)
        return role

    return _make


@pytest.fixture
def headers_for():
    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user.id)}"}

    return _headers


@pytest.fixture
def principal_for(db):
    def _principal(user):
        return principal_service.principal_for_user(db, user)

    return _principal


@pytest.fixture
def superadmin(make_user):
    return make_user("superadmin", email="root@example.com")


@pytest.fixture
def subadmin(make_user):
    return make_user("subadmin", email="sub@example.com")
