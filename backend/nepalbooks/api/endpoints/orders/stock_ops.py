"""
库存操作模块

库存变动是单条 UPDATE 语句：
    stock_quantity = CASE WHEN stock_quantity + :delta < 0 THEN 0 ELSE stock_quantity + :delta END
并发请求不会丢失更新，库存不会小于 0。
"""

import logging

from sqlalchemy import case, update
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.models.product import Product

logger = logging.getLogger(__name__)


def clamped_increment(column, delta):
    """column + delta，下限为 0"""
    new_value = column + delta
    return case((new_value < 0, 0), else_=new_value)


async def adjust_product_stock(db: AsyncSession, product_id: int, delta: int) -> bool:
    """
    调整商品库存

    Args:
        delta: 正数入库，负数出库

    Returns:
        商品不存在时返回 False
    """
    result = await db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(stock_quantity=clamped_increment(Product.stock_quantity, delta))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.warning(f"库存调整失败，商品不存在: product_id={product_id}")
        return False

    logger.debug(f"库存调整: product_id={product_id}, delta={delta:+d}")
    return True
