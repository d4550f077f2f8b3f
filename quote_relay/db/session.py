from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from quote_relay.db.models import Base

def create_sink_engine(url: str) -> AsyncEngine:
    return create_async_engine(url, echo=False, future=True)

def make_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)

async def init_db(engine: AsyncEngine) -> None:
    # create_all checks for existing tables, so repeated startups are harmless
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
