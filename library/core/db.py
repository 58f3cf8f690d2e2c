from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

# Базовый класс для моделей
Base = declarative_base()


def build_engine(database_url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Асинхронный движок"""
    return create_async_engine(database_url, future=True, echo=echo, **kwargs)


def build_session_factory(engine: AsyncEngine) -> sessionmaker:
    """Фабрика сессий"""
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Создание таблиц всех моделей"""
    # импортируем модели, чтобы они зарегистрировались в Base.metadata
    import library.db.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
