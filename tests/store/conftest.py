"""Store-backed fixtures: a throwaway SQLite file per test, real repositories.

SQLite ignores row locks, so these tests cover sequential behaviour and
atomicity; lock contention is covered in tests/integration against PostgreSQL.
"""

from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config.settings import Settings
from src.container import Services, build_services
from src.main import create_app
from src.wl_common.database import Database

ADMIN = "admin"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
        STARTING_BALANCE=100,
        ADMIN_USER_IDS=[ADMIN],
    )


@pytest_asyncio.fixture
async def database(settings: Settings) -> Database:
    db = Database.from_settings(settings)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
def services(database: Database, settings: Settings) -> Services:
    return build_services(database, settings)


@pytest_asyncio.fixture
async def client(database: Database, settings: Settings) -> AsyncClient:
    app = create_app(database=database, settings=settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
