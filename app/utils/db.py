# app/utils/db.py
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from app.utils.config import settings

Base = declarative_base()

# The question inventory lives behind this engine; any async SQLAlchemy URL works.
engine = create_async_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,
)

AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,  # Inserted rows are returned to the caller after commit
)

async def init_models():
    """Creates the question tables if they don't exist yet."""
    # Registers the models on Base.metadata
    from app.models import game_question  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def get_db() -> AsyncSession:
    """Request-scoped session dependency."""
    async with AsyncSessionLocal() as session:
        yield session
