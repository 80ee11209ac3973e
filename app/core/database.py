"""Conexión asíncrona a la base de datos con SQLAlchemy 2.0."""
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings


_engine_kwargs = {"echo": settings.debug, "pool_pre_ping": True}
if settings.database_url_async.startswith("postgresql"):
    _engine_kwargs.update(pool_size=5, max_overflow=10)

engine = create_async_engine(settings.database_url_async, **_engine_kwargs)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base para todos los modelos SQLAlchemy."""

    pass


async def get_db():
    """Dependencia para obtener una sesión de base de datos por request."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """Inicializa la base de datos (crear tablas si no existen)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
