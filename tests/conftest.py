import os

# Configuração de teste antes de importar a app (Settings é lido no import)
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_unused.db")
os.environ["ENVIRONMENT"] = "test"
os.environ["REDIS_ENABLED"] = "false"
os.environ["CRON_SECRET"] = "cron-secret"
os.environ["CLEANUP_API_KEY"] = "cleanup-key"
os.environ["LOG_LEVEL"] = "WARNING"

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from comanda_digital.database import get_db  # noqa: E402
from comanda_digital.db.base_class import Base  # noqa: E402
from comanda_digital.db.models import StaffRole  # noqa: E402
from comanda_digital.main import app  # noqa: E402

from factories import auth_headers, create_staff  # noqa: E402


@pytest.fixture
async def engine(tmp_path):
    # Banco em arquivo: requisição, efeitos colaterais e teste usam conexões próprias
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'comanda.db'}", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
async def waiter(db):
    return await create_staff(db)


@pytest.fixture
async def manager(db):
    return await create_staff(db, staff_id="MANAGER01", name="Carla", role=StaffRole.MANAGER)


@pytest.fixture
def waiter_headers(waiter):
    return auth_headers(waiter)


@pytest.fixture
def manager_headers(manager):
    return auth_headers(manager)
