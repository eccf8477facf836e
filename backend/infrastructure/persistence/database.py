"""
Async engine, session factory and schema bootstrap

Import path: from infrastructure.persistence.database import Base, get_session
"""
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from config import settings


def engine_options(url: str) -> dict:
    """Pool settings per backend; an in-memory SQLite database must stay on one connection"""
    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        if parsed.database in (None, "", ":memory:"):
            return {"poolclass": StaticPool}
        os.makedirs(os.path.dirname(os.path.abspath(parsed.database)), exist_ok=True)
    return {"pool_size": 5, "max_overflow": 10, "pool_pre_ping": True}


engine = create_async_engine(settings.DB_URL, echo=settings.DEBUG, **engine_options(settings.DB_URL))

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

Base = declarative_base()


async def init_db(drop_existing: bool = False):
    """Create every table; ``drop_existing`` wipes the schema first"""
    from infrastructure.persistence import models  # noqa: F401  registers tables

    async with engine.begin() as conn:
        if drop_existing:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; committed when the handler returns, rolled back on error"""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def get_db_session():
    """Same contract as get_session, for scripts and the operator CLI"""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
