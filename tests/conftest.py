"""Shared fixtures: in-memory SQLite schema, a session, an HTTP client and seed rows."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401 - register all tables on Base.metadata
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.exercise import Exercise
from app.models.student import Student


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN itself
    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


async def make_student(db: AsyncSession, name: str = "Ana") -> Student:
    student = Student(name=name)
    db.add(student)
    await db.flush()
    return student


async def make_exercise(db: AsyncSession, name: str = "Bench Press", muscle_group: str = "Chest") -> Exercise:
    exercise = Exercise(name=name, muscle_group=muscle_group)
    db.add(exercise)
    await db.flush()
    return exercise


@pytest.fixture
async def student(db):
    return await make_student(db)


@pytest.fixture
async def exercise(db):
    return await make_exercise(db)


@pytest.fixture
async def squat(db):
    return await make_exercise(db, "Back Squat", "Legs")


@pytest.fixture
async def other_student(db):
    return await make_student(db, "Bruno")
