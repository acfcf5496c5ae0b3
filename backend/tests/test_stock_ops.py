import asyncio
from decimal import Decimal

from sqlalchemy import select

from nepalbooks.api.endpoints.orders.account_ops import (
    adjust_customer_balance, adjust_supplier_balance
)
from nepalbooks.api.endpoints.orders.stock_ops import adjust_product_stock
from nepalbooks.models.party import Customer, Supplier
from nepalbooks.models.product import Product


async def _stock(session, product_id):
    result = await session.execute(select(Product.stock_quantity).where(Product.id == product_id))
    return result.scalar_one()


async def _balance(session, model, entity_id):
    result = await session.execute(select(model.outstanding_balance).where(model.id == entity_id))
    return Decimal(str(result.scalar_one()))


async def test_stock_increment_and_decrement(session):
    product = Product(name="Pen", sku="PEN-1", unit_price=Decimal("10.00"), stock_quantity=10)
    session.add(product)
    await session.commit()

    assert await adjust_product_stock(session, product.id, 5) is True
    assert await _stock(session, product.id) == 15

    assert await adjust_product_stock(session, product.id, -4) is True
    assert await _stock(session, product.id) == 11


async def test_stock_never_goes_negative(session):
    product = Product(name="Pen", sku="PEN-2", unit_price=Decimal("10.00"), stock_quantity=3)
    session.add(product)
    await session.commit()

    assert await adjust_product_stock(session, product.id, -10) is True
    await session.commit()
    assert await _stock(session, product.id) == 0


async def test_stock_adjust_missing_product(session):
    assert await adjust_product_stock(session, 9999, 1) is False


async def test_customer_balance_floors_at_zero(session):
    customer = Customer(name="Sita Stores", outstanding_balance=Decimal("100.00"))
    session.add(customer)
    await session.commit()

    assert await adjust_customer_balance(session, customer.id, Decimal("50.25")) is True
    assert await _balance(session, Customer, customer.id) == Decimal("150.25")

    assert await adjust_customer_balance(session, customer.id, Decimal("-500")) is True
    assert await _balance(session, Customer, customer.id) == Decimal("0")


async def test_supplier_balance_missing(session):
    assert await adjust_supplier_balance(session, 12345, Decimal("10")) is False


async def test_supplier_balance_increment(session):
    supplier = Supplier(name="Everest Supplies")
    session.add(supplier)
    await session.commit()

    assert await adjust_supplier_balance(session, supplier.id, Decimal("282.50")) is True
    assert await _balance(session, Supplier, supplier.id) == Decimal("282.50")


# ---------- 并发 ----------

async def _apply_in_own_session(app, adjust, entity_id, delta):
    async with app.state.session_factory() as db:
        assert await adjust(db, entity_id, delta) is True
        await db.commit()


async def test_concurrent_stock_deltas_are_not_lost(app, session):
    product = Product(name="Pen", sku="PEN-C", unit_price=Decimal("10.00"), stock_quantity=20)
    session.add(product)
    await session.commit()

    deltas = [5, -3, 7, -2, 4, -1, 6, -8]
    await asyncio.gather(*[
        _apply_in_own_session(app, adjust_product_stock, product.id, d) for d in deltas
    ])
    assert await _stock(session, product.id) == 20 + sum(deltas)


async def test_concurrent_stock_decrements_floor_at_zero(app, session):
    product = Product(name="Pen", sku="PEN-D", unit_price=Decimal("10.00"), stock_quantity=10)
    session.add(product)
    await session.commit()

    await asyncio.gather(*[
        _apply_in_own_session(app, adjust_product_stock, product.id, -3) for _ in range(6)
    ])
    assert await _stock(session, product.id) == 0


async def test_concurrent_balance_deltas_are_not_lost(app, session):
    customer = Customer(name="Hari Kirana", outstanding_balance=Decimal("0.00"))
    supplier = Supplier(name="Birgunj Traders", outstanding_balance=Decimal("0.00"))
    session.add_all([customer, supplier])
    await session.commit()

    amounts = [Decimal("11.30"), Decimal("282.50"), Decimal("0.05"), Decimal("99.99")]
    await asyncio.gather(
        *[_apply_in_own_session(app, adjust_customer_balance, customer.id, a) for a in amounts],
        *[_apply_in_own_session(app, adjust_supplier_balance, supplier.id, a) for a in amounts],
    )
    assert await _balance(session, Customer, customer.id) == sum(amounts)
    assert await _balance(session, Supplier, supplier.id) == sum(amounts)
