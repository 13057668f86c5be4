"""Service test fixtures — async DB, FastAPI test client, seeded catalog, fakes.

Invariants:
    - Every test gets a fresh in-memory SQLite database and a fresh GameRegistry
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Fakes in fakes.py implement the boundary Protocols structurally (no inheritance)
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from tests.services.fakes import FakeClock
from harbor_quest.db.base import Base
from harbor_quest.infrastructure.database import get_db, DatabaseSessionManager
from harbor_quest.models.harbor import HarborRecord
from harbor_quest.models.trivia_question import TriviaQuestionRecord
from harbor_quest.services.game_registry import GameRegistry
import harbor_quest.infrastructure.database as db_module
from harbor_quest.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.game_registry = GameRegistry()

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def seed_catalog(test_db):
    """Three Finnish harbors and three trivia questions; returns the records."""
    harbors = [
        HarborRecord(
            name="Eteläsatama", latitude=60.1675, longitude=24.9525,
            region="Uusimaa", harbor_types=["guest harbor"],
            hints=["Capital city", "Market square", "Ferries to Tallinn"],
        ),
        HarborRecord(
            name="Turku Aura", latitude=60.4390, longitude=22.2440,
            difficulty="easy", region="Southwest Finland",
            hints=["Old capital", "River Aura"],
        ),
        HarborRecord(
            name="Toppila", latitude=65.0350, longitude=25.4270,
            difficulty="hard", region="Northern Ostrobothnia",
            notable_feature="Toppila silo",
        ),
    ]
    questions = [
        TriviaQuestionRecord(
            question="Which sea lies south of Helsinki?",
            answers=["Bothnian Sea", "Gulf of Finland", "Lake Saimaa"],
            correct_answer=1, explanation="Helsinki faces the Gulf of Finland.",
        ),
        TriviaQuestionRecord(
            question="Which river runs through Turku?",
            answers=["Aura", "Kemijoki", "Vantaa"], correct_answer=0,
        ),
        TriviaQuestionRecord(
            question="How many lakes does Finland have, roughly?",
            answers=["1 800", "18 000", "188 000"], correct_answer=2,
        ),
    ]
    test_db.add_all(harbors + questions)
    await test_db.commit()
    return {"harbors": harbors, "questions": questions}


@pytest.fixture
def fake_clock():
    return FakeClock()
