"""Shared test fixtures for the back-office API test suite."""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

import app.models  # noqa: F401
from app.core.database import get_db
from app.core.security import get_active_user
from app.main import app
from app.models.base import Base
from app.models.user import User, UserRole


@pytest.fixture
def session_factory(tmp_path: Path) -> Iterator[async_sessionmaker]:
    """A fresh SQLite database per test, with every table created."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )

    async def create_schema() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_schema())
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def run_in_db(
    session_factory: async_sessionmaker,
) -> Callable[[Callable[[AsyncSession], Awaitable[Any]]], Any]:
    """Run an async callable with its own session and return its result."""

    def runner(func: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        async def wrapper() -> Any:
            async with session_factory() as session:
                return await func(session)

        return asyncio.run(wrapper())

    return runner


@pytest.fixture
def staff_user() -> User:
    """An active staff user, never persisted."""
    return User(
        id=1,
        username="maria",
        email="maria@example.com",
        full_name="Maria Faz",
        hashed_password="not-used",
        role=UserRole.STAFF,
        is_active=True,
        created_at=datetime(2024, 1, 1),
    )


@pytest.fixture
def client(session_factory: async_sessionmaker, staff_user: User) -> Iterator[TestClient]:
    """API client backed by the test database and authenticated as staff."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_active_user] = lambda: staff_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def owner(client: TestClient) -> dict:
    response = client.post("/api/owners/", json={"name": "João Silva", "email": "joao@example.com"})
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def property_data(owner: dict) -> dict:
    return {
        "name": "Apartamento Sé",
        "aliases": ["Apt Se", "Sé 2"],
        "owner_id": owner["id"],
        "cleaning_cost": "40.00",
        "check_in_fee": "20.00",
        "commission": "10",
        "team_payment": "25.00",
        "monthly_fixed_cost": "0",
    }


@pytest.fixture
def created_property(client: TestClient, property_data: dict) -> dict:
    response = client.post("/api/properties/", json=property_data)
    assert response.status_code == 200
    return response.json()
