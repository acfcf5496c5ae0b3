"""
往来余额操作模块

销售单：客户未结余额 + 价税合计
采购单：供应商未结余额 + 价税合计
与库存一样使用单条原子 UPDATE，余额下限为 0。
"""

import logging
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.models.party import Customer, Supplier
from .stock_ops import clamped_increment

logger = logging.getLogger(__name__)


async def _adjust_balance(db: AsyncSession, model, entity_id: int, amount: Decimal) -> bool:
    delta = Decimal(str(amount))
    result = await db.execute(
        update(model)
        .where(model.id == entity_id)
        .values(outstanding_balance=clamped_increment(model.outstanding_balance, delta))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        logger.warning(f"余额调整失败，{model.__tablename__} 不存在: id={entity_id}")
        return False

    logger.debug(f"余额调整: {model.__tablename__} id={entity_id}, amount={delta}")
    return True


async def adjust_customer_balance(db: AsyncSession, customer_id: int, amount: Decimal) -> bool:
    """调整客户未结余额，客户不存在时返回 False"""
    return await _adjust_balance(db, Customer, customer_id, amount)


async def adjust_supplier_balance(db: AsyncSession, supplier_id: int, amount: Decimal) -> bool:
    """调整供应商未结余额，供应商不存在时返回 False"""
    return await _adjust_balance(db, Supplier, supplier_id, amount)
