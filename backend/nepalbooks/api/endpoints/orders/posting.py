"""
单据过账模块

创建销售单/采购单时，在同一个事务内完成：
1. 写入抬头
2. 逐行写入明细并调整库存（销售出库 / 采购入库）
3. 按价税合计增加客户/供应商未结余额

任一步失败则整体回滚，不会留下部分数据。

自动生成的单号在并发创建时可能撞上唯一约束，
此时回滚并重新取号，最多尝试 DOCUMENT_NO_ATTEMPTS 次。
"""

import logging
from datetime import datetime
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from nepalbooks.models.party import Customer, Supplier
from nepalbooks.models.purchase import Purchase, PurchaseItem
from nepalbooks.models.sale import Sale, SaleItem
from nepalbooks.schemas.order import PurchaseCreate, SaleCreate

from .account_ops import adjust_customer_balance, adjust_supplier_balance
from .core import (
    BILL_PREFIX, DEFAULT_VAT_RATE, INVOICE_PREFIX,
    build_lines, ensure_unique_number, generate_document_no, summarize_lines
)
from .stock_ops import adjust_product_stock

logger = logging.getLogger(__name__)

DOCUMENT_NO_ATTEMPTS = 10


def _is_number_conflict(exc: IntegrityError, column) -> bool:
    """唯一约束冲突是否发生在单号列上"""
    return f"{column.table.name}.{column.name}" in str(exc.orig)


async def _post_with_retry(db: AsyncSession, insert, column, supplied_number, label: str):
    """
    执行过账并提交

    Args:
        insert: 写入单据的协程函数，不提交
        column: 单号列
        supplied_number: 调用方指定的单号，None 表示自动生成
        label: 单据名称，用于错误信息
    """
    for attempt in range(1, DOCUMENT_NO_ATTEMPTS + 1):
        try:
            document = await insert()
            await db.commit()
            return document
        except IntegrityError as exc:
            await db.rollback()
            if not _is_number_conflict(exc, column):
                raise
            if supplied_number:
                raise HTTPException(status_code=400, detail=f"{label} {supplied_number} already exists")
            if attempt == DOCUMENT_NO_ATTEMPTS:
                logger.error(f"❌ {label} 单号分配失败，已重试 {attempt} 次")
                raise HTTPException(status_code=409, detail=f"Could not allocate a {label.lower()} number, please retry")
            logger.warning(f"⚠️ {label} 单号冲突，重新取号 (第 {attempt} 次)")
        except Exception:
            await db.rollback()
            raise


async def record_sale(
    db: AsyncSession,
    sale_in: SaleCreate,
    default_vat_rate: Decimal = DEFAULT_VAT_RATE) -> Sale:
    """创建销售单：出库 + 增加客户未结余额"""

    async def insert() -> Sale:
        customer = await db.get(Customer, sale_in.customer_id)
        if not customer:
            raise HTTPException(status_code=400, detail=f"Customer {sale_in.customer_id} not found")

        if sale_in.invoice_number:
            await ensure_unique_number(db, Sale.invoice_number, sale_in.invoice_number, "Invoice")
            invoice_number = sale_in.invoice_number
        else:
            invoice_number = await generate_document_no(db, Sale.invoice_number, INVOICE_PREFIX)

        lines = await build_lines(db, sale_in.items, default_vat_rate)
        totals = summarize_lines(lines, sale_in.subtotal, sale_in.vat_amount, sale_in.total_amount)

        sale = Sale(
            invoice_number=invoice_number,
            customer_id=customer.id,
            sale_date=sale_in.sale_date or datetime.now(),
            due_date=sale_in.due_date,
            subtotal=totals.subtotal,
            vat_amount=totals.vat_amount,
            total_amount=totals.total_amount,
            status=sale_in.status,
            notes=sale_in.notes)
        db.add(sale)
        await db.flush()

        for line in lines:
            db.add(SaleItem(sale_id=sale.id, **line.as_row()))
            await db.flush()
            await adjust_product_stock(db, line.product_id, -line.quantity)

        await adjust_customer_balance(db, customer.id, totals.total_amount)
        return sale

    sale = await _post_with_retry(db, insert, Sale.invoice_number, sale_in.invoice_number, "Invoice")
    logger.info(
        f"🧾 销售单已创建: {sale.invoice_number} 客户={sale.customer_id} "
        f"明细={len(sale_in.items)} 合计={sale.total_amount}"
    )
    return sale


async def record_purchase(
    db: AsyncSession,
    purchase_in: PurchaseCreate,
    default_vat_rate: Decimal = DEFAULT_VAT_RATE) -> Purchase:
    """创建采购单：入库 + 增加供应商未结余额"""

    async def insert() -> Purchase:
        supplier = await db.get(Supplier, purchase_in.supplier_id)
        if not supplier:
            raise HTTPException(status_code=400, detail=f"Supplier {purchase_in.supplier_id} not found")

        if purchase_in.bill_number:
            await ensure_unique_number(db, Purchase.bill_number, purchase_in.bill_number, "Bill")
            bill_number = purchase_in.bill_number
        else:
            bill_number = await generate_document_no(db, Purchase.bill_number, BILL_PREFIX)

        lines = await build_lines(db, purchase_in.items, default_vat_rate)
        totals = summarize_lines(lines, purchase_in.subtotal, purchase_in.vat_amount, purchase_in.total_amount)

        purchase = Purchase(
            bill_number=bill_number,
            supplier_id=supplier.id,
            purchase_date=purchase_in.purchase_date or datetime.now(),
            due_date=purchase_in.due_date,
            subtotal=totals.subtotal,
            vat_amount=totals.vat_amount,
            total_amount=totals.total_amount,
            status=purchase_in.status,
            notes=purchase_in.notes)
        db.add(purchase)
        await db.flush()

        for line in lines:
            db.add(PurchaseItem(purchase_id=purchase.id, **line.as_row()))
            await db.flush()
            await adjust_product_stock(db, line.product_id, line.quantity)

        await adjust_supplier_balance(db, supplier.id, totals.total_amount)
        return purchase

    purchase = await _post_with_retry(db, insert, Purchase.bill_number, purchase_in.bill_number, "Bill")
    logger.info(
        f"📦 采购单已创建: {purchase.bill_number} 供应商={purchase.supplier_id} "
        f"明细={len(purchase_in.items)} 合计={purchase.total_amount}"
    )
    return purchase
