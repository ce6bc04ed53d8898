"""
Shared fixtures: in-memory SQLite database, seeded users and an API client.

Settings are read at import time, so the environment is set before any
``app`` module is imported.
"""

import os

os.environ["DEBUG"] = "true"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ALLOWED_ORIGINS"] = "http://localhost:5173"
os.environ["FIREBASE_PROJECT_ID"] = "rentline-test"

import httpx
import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.database import Base, get_db
from app.core.security import AuthenticatedUser, verify_firebase_token
from app.main import app as fastapi_app
from app.models.user import User
from app.services.business import BusinessService


@pytest.fixture
async def engine():
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine):
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def owner(db) -> User:
    user = User(firebase_uid="owner-uid", email="owner@example.com", full_name="Olive Owner")
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def super_admin(db) -> User:
    user = User(
        firebase_uid="admin-uid",
        email="admin@rentline.app",
        full_name="Ada Admin",
        is_super_admin=True,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def business(db, owner):
    business = await BusinessService(db).create_business(
        owner.id, {"business_name": "Maple Rentals"}
    )
    await db.commit()
    return business


@pytest.fixture
def auth_as():
    """Mutable identity returned by the token verifier; tests switch it."""
    return {"uid": "owner-uid", "email": "owner@example.com"}


@pytest.fixture
async def client(db, auth_as):
    async def override_get_db():
        yield db

    async def override_verify_token():
        return AuthenticatedUser(uid=auth_as["uid"], email=auth_as.get("email"))

    fastapi_app.dependency_overrides[get_db] = override_get_db
    fastapi_app.dependency_overrides[verify_firebase_token] = override_verify_token

    transport = httpx.ASGITransport(app=fastapi_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def property_payload():
    """Factory for a valid property create body."""

    def make(name: str = "Elm Street Duplex") -> dict:
        return {
            "name": name,
            "property_type": "multi_family",
            "address_line1": "12 Elm Street",
            "city": "Halifax",
            "state": "NS",
            "postal_code": "B3H 1A1",
        }

    return make
