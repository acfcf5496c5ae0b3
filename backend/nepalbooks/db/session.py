from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from nepalbooks.core.config import Settings


def build_engine(settings: Settings) -> AsyncEngine:
    """
    创建异步引擎
    仅在开发环境打印SQL（通过 SQL_DEBUG 控制）
    """
    return create_async_engine(
        settings.async_database_uri,
        echo=settings.SQL_DEBUG,
        future=True,
    )


def build_session_factory(engine: AsyncEngine) -> sessionmaker:
    """创建异步会话工厂"""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
