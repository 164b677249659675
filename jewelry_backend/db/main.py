from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from jewelry_backend.config import Config

async_engine = create_async_engine(
    Config.DATABASE_URL,
    echo=False,
    future=True,
    pool_size=Config.DATABASE_POOL_SIZE,
    max_overflow=Config.DATABASE_MAX_OVERFLOW,
    pool_timeout=60
)

# Analytics reads open one session per collection
Session = sessionmaker(
    async_engine,
    class_=AsyncSession,
    expire_on_commit=False
)
