# comanda_digital/database.py
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from comanda_digital.core.config import settings

# Define o motor de banco de dados assíncrono
engine = create_async_engine(settings.DATABASE_URL, echo=settings.ENVIRONMENT == "development")

# Cria uma fábrica de sessões assíncronas
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)


# Dependência para obter uma sessão de banco de dados
async def get_db() -> AsyncIterator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
