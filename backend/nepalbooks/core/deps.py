"""依赖注入 - 单机版（无认证）"""
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.core.config import Settings


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话依赖

    会话工厂由 create_app() 创建并挂在 app.state 上
    """
    async with request.app.state.session_factory() as session:
        yield session


def get_settings(request: Request) -> Settings:
    """获取当前应用的配置"""
    return request.app.state.settings
