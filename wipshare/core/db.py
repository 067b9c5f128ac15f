from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from .config import settings
from .base import Base

engine = create_async_engine(settings.DATABASE_DSN, pool_pre_ping=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

async def get_session():
    async with SessionLocal() as session:
        yield session

async def init_models():
    # model modules must be imported so their tables are registered on Base.metadata
    from wipshare.modules.tiers import models as _tiers  # noqa: F401
    from wipshare.modules.users import models as _users  # noqa: F401
    from wipshare.modules.usage import models as _usage  # noqa: F401
    from wipshare.modules.tracks import models as _tracks  # noqa: F401
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
