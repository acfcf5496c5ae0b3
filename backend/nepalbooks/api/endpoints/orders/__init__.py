"""
销售单/采购单模块

按功能拆分为多个子模块：
- core: 单号生成、明细金额与税额计算、抬头汇总
- stock_ops: 库存变动（原子更新，下限为 0）
- account_ops: 客户/供应商未结余额变动（原子更新，下限为 0）
- posting: 创建单据并在同一事务内处理库存和余额
- sales / purchases: API 路由
"""

from .sales import router as sales_router
from .purchases import router as purchases_router

__all__ = ["sales_router", "purchases_router"]
