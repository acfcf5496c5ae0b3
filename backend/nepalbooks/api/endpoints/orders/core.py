"""
单据核心功能模块
- 单号生成
- 明细金额与税额计算
- 抬头汇总
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.models.product import Product
from nepalbooks.schemas.order import OrderItemCreate

CENT = Decimal("0.01")
DEFAULT_VAT_RATE = Decimal("13.00")

INVOICE_PREFIX = "INV"
BILL_PREFIX = "PO"


def quantize_money(value: Decimal) -> Decimal:
    """金额保留两位小数（四舍五入）"""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class LineAmounts:
    """明细计算结果"""
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    vat_rate: Decimal
    vat_amount: Decimal

    def as_row(self) -> Dict:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total_price": self.total_price,
            "vat_rate": self.vat_rate,
            "vat_amount": self.vat_amount,
        }


@dataclass
class DocumentTotals:
    subtotal: Decimal
    vat_amount: Decimal
    total_amount: Decimal


def calculate_line(
    product_id: int,
    quantity: int,
    unit_price: Decimal,
    vat_rate: Optional[Decimal] = None) -> LineAmounts:
    """
    计算单行金额

    金额 = 数量 × 单价
    税额 = 金额 × 税率 / 100
    """
    rate = Decimal(str(vat_rate)) if vat_rate is not None else DEFAULT_VAT_RATE
    price = Decimal(str(unit_price))
    total_price = quantize_money(Decimal(quantity) * price)
    vat_amount = quantize_money(total_price * rate / Decimal("100"))
    return LineAmounts(
        product_id=product_id,
        quantity=quantity,
        unit_price=quantize_money(price),
        total_price=total_price,
        vat_rate=rate,
        vat_amount=vat_amount)


def summarize_lines(
    lines: List[LineAmounts],
    subtotal: Optional[Decimal] = None,
    vat_amount: Optional[Decimal] = None,
    total_amount: Optional[Decimal] = None) -> DocumentTotals:
    """
    汇总抬头金额

    调用方传入的合计直接使用，未传的按明细计算：
    不含税金额 = Σ 明细金额，税额 = Σ 明细税额，价税合计 = 不含税金额 + 税额
    """
    if subtotal is None:
        subtotal = sum((line.total_price for line in lines), Decimal("0"))
    if vat_amount is None:
        vat_amount = sum((line.vat_amount for line in lines), Decimal("0"))
    if total_amount is None:
        total_amount = Decimal(str(subtotal)) + Decimal(str(vat_amount))
    return DocumentTotals(
        subtotal=quantize_money(subtotal),
        vat_amount=quantize_money(vat_amount),
        total_amount=quantize_money(total_amount))


async def build_lines(
    db: AsyncSession,
    items_data: List[OrderItemCreate],
    default_vat_rate: Decimal = DEFAULT_VAT_RATE) -> List[LineAmounts]:
    """校验明细中的商品并计算每行金额"""
    if not items_data:
        raise HTTPException(status_code=400, detail="At least one line item is required")

    product_ids = {item.product_id for item in items_data}
    result = await db.execute(select(Product.id).where(Product.id.in_(product_ids)))
    existing = set(result.scalars().all())

    lines = []
    for index, item_in in enumerate(items_data):
        if item_in.product_id not in existing:
            raise HTTPException(
                status_code=400,
                detail=f"Item {index + 1}: product {item_in.product_id} not found"
            )
        rate = item_in.vat_rate if item_in.vat_rate is not None else default_vat_rate
        lines.append(calculate_line(item_in.product_id, item_in.quantity, item_in.unit_price, rate))
    return lines


async def generate_document_no(db: AsyncSession, column, prefix: str) -> str:
    """
    生成单号：前缀-日期+当日序号，如 INV-20250101001

    序号取当日已有单号的最大值 + 1，不足三位补零
    """
    head = f"{prefix}-{datetime.now().strftime('%Y%m%d')}"
    result = await db.execute(select(column).where(column.like(f"{head}%")))

    seq = 0
    for number in result.scalars().all():
        suffix = number[len(head):]
        if suffix.isdigit():
            seq = max(seq, int(suffix))

    return f"{head}{seq + 1:03d}"


async def ensure_unique_number(db: AsyncSession, column, number: str, label: str) -> None:
    """校验调用方指定的单号未被占用"""
    result = await db.execute(select(column).where(column == number))
    if result.scalar_one_or_none() is not None:
        raise HTTPException(status_code=400, detail=f"{label} {number} already exists")
