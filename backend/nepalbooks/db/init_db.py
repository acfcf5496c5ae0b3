import logging

from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import sessionmaker

from nepalbooks.db.base import Base
from nepalbooks.db.migrations import run_migrations

# 导入所有模型，确保表能被创建
from nepalbooks import models  # noqa: F401

logger = logging.getLogger(__name__)


async def ensure_tables_exist(engine: AsyncEngine) -> None:
    """
    确保数据库表存在（应用启动时调用）
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def prepare_database(engine: AsyncEngine, session_factory: sessionmaker) -> dict:
    """建表 + 迁移 + 默认数据"""
    await ensure_tables_exist(engine)
    logger.info("📊 数据库表已就绪")

    async with session_factory() as db:
        result = await run_migrations(db)

    if result.get("columns_added"):
        logger.info(f"📦 数据库结构更新: 添加了 {len(result['columns_added'])} 个字段")
    if result.get("old_version") != result.get("new_version"):
        logger.info(f"📊 数据库版本: {result.get('old_version') or '初始'} → {result.get('new_version')}")
    return result
