import os

from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool

# ✅ 1. SQLite Database URL
DATABASE_URL = os.getenv("FUEL_DB_URL", "sqlite+aiosqlite:///./fuel_station.db")

# ✅ 2. Async Engine
engine = create_async_engine(
    DATABASE_URL,
    echo=os.getenv("FUEL_SQL_ECHO", "0") == "1",
    poolclass=NullPool,
    connect_args={"check_same_thread": False}
)


@event.listens_for(engine.sync_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_conn, _record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()

# ============================================================
# 🔥 MAIN SESSION MAKERS
# ============================================================

# Used by FastAPI endpoints
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)

# used by deferred jobs (pending deletes) that outlive the request
async_session_maker = AsyncSessionLocal

# ============================================================
# Base class
# ============================================================

Base = declarative_base()

# ============================================================
# FastAPI dependency
# ============================================================

async def get_db() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session

# ============================================================
# Create tables
# ============================================================

async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
