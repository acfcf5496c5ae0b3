"""
初始化数据库

    python init_db.py                      # 建表 + 迁移 + 默认数据
    python init_db.py --admin admin 1234   # 同时创建管理员账号
"""

import argparse
import asyncio
import logging

from sqlalchemy import select

from nepalbooks.core.config import settings
from nepalbooks.core.security import get_password_hash
from nepalbooks.db.init_db import prepare_database
from nepalbooks.db.session import build_engine, build_session_factory
from nepalbooks.models.user import User

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def init_db(admin_username: str = None, admin_password: str = None) -> None:
    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    try:
        await prepare_database(engine, session_factory)

        if admin_username:
            async with session_factory() as db:
                result = await db.execute(select(User).where(User.username == admin_username))
                if result.scalars().first():
                    logger.info(f"管理员 {admin_username} 已存在")
                else:
                    db.add(User(
                        username=admin_username,
                        password=get_password_hash(admin_password),
                        full_name="Administrator",
                        role="admin",
                    ))
                    await db.commit()
                    logger.info(f"已创建管理员: {admin_username}")
    finally:
        await engine.dispose()

    logger.info(f"数据库初始化完成: {settings.database_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="初始化 NepalBooks 数据库")
    parser.add_argument("--admin", nargs=2, metavar=("USERNAME", "PASSWORD"), help="创建管理员账号")
    args = parser.parse_args()

    username, password = args.admin if args.admin else (None, None)
    asyncio.run(init_db(username, password))
