from decimal import Decimal

import pytest
from sqlalchemy import select
from werkzeug.security import check_password_hash

from nepalbooks.models.user import User


# ---------- 默认数据与公司设置 ----------

async def test_default_categories_seeded(client):
    names = {c["name"] for c in (await client.get("/api/categories")).json()}
    assert names == {"Electronics", "Clothing", "Home & Garden", "Books"}


async def test_company_settings_defaults_and_update(client):
    company = (await client.get("/api/settings/company")).json()
    assert company["company_name"] == "Your Company Name"
    assert Decimal(company["vat_rate"]) == Decimal("13")
    assert company["tax_year"] == "2080-81"

    resp = await client.put("/api/settings/company", json={
        "company_name": "Himalayan Traders",
        "pan_number": "601234567",
    })
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["company_name"] == "Himalayan Traders"
    assert updated["pan_number"] == "601234567"
    assert updated["tax_year"] == "2080-81"
    assert updated["id"] == company["id"]


# ---------- 分类 ----------

async def test_category_crud(client):
    created = (await client.post("/api/categories", json={"name": "Stationery"})).json()
    assert created["products_count"] == 0

    resp = await client.put(f"/api/categories/{created['id']}", json={"description": "Pens & paper"})
    assert resp.json()["description"] == "Pens & paper"

    dup = await client.post("/api/categories", json={"name": "Stationery"})
    assert dup.status_code == 400

    assert (await client.delete(f"/api/categories/{created['id']}")).json() == {"success": True}
    missing = await client.get(f"/api/categories/{created['id']}")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Category not found"}


async def test_category_in_use_cannot_be_deleted(client, make_product):
    category = (await client.post("/api/categories", json={"name": "Tea"})).json()
    await make_product(sku="TEA-1", category_id=category["id"])

    resp = await client.delete(f"/api/categories/{category['id']}")
    assert resp.status_code == 400
    fetched = (await client.get(f"/api/categories/{category['id']}")).json()
    assert fetched["products_count"] == 1


# ---------- 商品 ----------

async def test_product_crud(client, make_product):
    categories = (await client.get("/api/categories")).json()
    books = next(c for c in categories if c["name"] == "Books")

    product = await make_product(sku="BK-001", name="Muna Madan", category_id=books["id"], stock_quantity=7)
    assert product["category_name"] == "Books"
    assert product["unit"] == "pcs"
    assert product["min_stock_level"] == 5
    assert product["is_low_stock"] is False

    by_sku = await client.get("/api/products/sku/BK-001")
    assert by_sku.json()["id"] == product["id"]
    assert (await client.get("/api/products/sku/NOPE")).status_code == 404

    resp = await client.put(f"/api/products/{product['id']}", json={
        "unit_price": "350.00",
        "min_stock_level": 10,
        "stock_quantity": 999,
    })
    assert resp.status_code == 200
    updated = resp.json()
    assert Decimal(updated["unit_price"]) == Decimal("350")
    # 库存不能通过更新接口修改
    assert updated["stock_quantity"] == 7
    assert updated["is_low_stock"] is True

    assert (await client.delete(f"/api/products/{product['id']}")).json() == {"success": True}
    assert (await client.get(f"/api/products/{product['id']}")).status_code == 404


async def test_duplicate_sku_rejected(client, make_product):
    await make_product(sku="DUP-1")
    resp = await client.post("/api/products", json={"name": "Other", "sku": "DUP-1", "unit_price": "1.00"})
    assert resp.status_code == 400
    assert resp.json() == {"message": "SKU 'DUP-1' already exists"}

    other = await make_product(sku="DUP-2")
    resp = await client.put(f"/api/products/{other['id']}", json={"sku": "DUP-1"})
    assert resp.status_code == 400


async def test_product_rejects_negative_opening_stock(client):
    resp = await client.post("/api/products", json={
        "name": "Broken", "sku": "NEG-1", "unit_price": "1.00", "stock_quantity": -1,
    })
    assert resp.status_code == 400
    assert resp.json()["message"].startswith("Validation error: stock_quantity")


async def test_product_filters(client, make_product):
    await make_product(sku="RICE-1", name="Basmati Rice", stock_quantity=2)
    await make_product(sku="DAL-1", name="Masoor Dal", stock_quantity=40)

    found = (await client.get("/api/products", params={"search": "rice"})).json()
    assert [p["sku"] for p in found] == ["RICE-1"]
    low = (await client.get("/api/products", params={"low_stock": "true"})).json()
    assert [p["sku"] for p in low] == ["RICE-1"]


async def test_product_used_in_sale_cannot_be_deleted(client, make_product, make_customer):
    product = await make_product()
    customer = await make_customer()
    await client.post("/api/sales", json={
        "customer_id": customer["id"],
        "items": [{"product_id": product["id"], "quantity": 1, "unit_price": "10.00"}],
    })
    resp = await client.delete(f"/api/products/{product['id']}")
    assert resp.status_code == 400


# ---------- 客户 / 供应商 ----------

async def test_customer_opening_balance_and_credit_limit(client, make_customer):
    customer = await make_customer(outstanding_balance="500.00", credit_limit="400.00")
    assert Decimal(customer["outstanding_balance"]) == Decimal("500")
    assert customer["over_credit_limit"] is True

    # 余额不能通过更新接口修改
    resp = await client.put(f"/api/customers/{customer['id']}", json={
        "phone": "9800000000", "outstanding_balance": "0",
    })
    assert resp.status_code == 200
    assert resp.json()["phone"] == "9800000000"
    assert Decimal(resp.json()["outstanding_balance"]) == Decimal("500")


async def test_customer_with_sales_cannot_be_deleted(client, make_product, make_customer):
    product = await make_product()
    customer = await make_customer()
    await client.post("/api/sales", json={
        "customer_id": customer["id"],
        "items": [{"product_id": product["id"], "quantity": 1, "unit_price": "10.00"}],
    })
    assert (await client.delete(f"/api/customers/{customer['id']}")).status_code == 400


async def test_supplier_crud(client, make_supplier):
    supplier = await make_supplier(vat_number="300000001")
    assert supplier["vat_number"] == "300000001"

    resp = await client.put(f"/api/suppliers/{supplier['id']}", json={"is_active": False})
    assert resp.json()["is_active"] is False

    assert (await client.delete(f"/api/suppliers/{supplier['id']}")).json() == {"success": True}
    missing = await client.get(f"/api/suppliers/{supplier['id']}")
    assert missing.json() == {"message": "Supplier not found"}
    assert (await client.get(f"/api/suppliers/{supplier['id']}/purchases")).status_code == 404


# ---------- 费用 ----------

async def test_expense_vat_defaults(client):
    applicable = (await client.post("/api/expenses", json={
        "title": "Laptop repair", "amount": "200.00", "category": "maintenance", "is_vat_applicable": True,
    })).json()
    assert Decimal(applicable["vat_amount"]) == Decimal("26")

    plain = (await client.post("/api/expenses", json={
        "title": "Tea", "amount": "80.00", "category": "office",
    })).json()
    assert Decimal(plain["vat_amount"]) == 0

    resp = await client.put(f"/api/expenses/{plain['id']}", json={"is_vat_applicable": True})
    assert Decimal(resp.json()["vat_amount"]) == Decimal("10.4")

    office = (await client.get("/api/expenses", params={"category": "office"})).json()
    assert [e["id"] for e in office] == [plain["id"]]

    assert (await client.delete(f"/api/expenses/{plain['id']}")).json() == {"success": True}
    assert (await client.get(f"/api/expenses/{plain['id']}")).status_code == 404


# ---------- 员工 ----------

async def test_staff_password_is_hashed_and_hidden(client, session):
    resp = await client.post("/api/staff", json={
        "username": "hari", "password": "secret1", "full_name": "Hari Bahadur", "role": "accountant",
    })
    assert resp.status_code == 200
    staff = resp.json()
    assert "password" not in staff
    assert staff["role"] == "accountant"

    stored = (await session.execute(select(User.password).where(User.id == staff["id"]))).scalar_one()
    assert stored != "secret1"
    assert check_password_hash(stored, "secret1")

    dup = await client.post("/api/staff", json={
        "username": "hari", "password": "other1", "full_name": "Another Hari",
    })
    assert dup.status_code == 400

    bad_role = await client.post("/api/staff", json={
        "username": "gita", "password": "secret1", "full_name": "Gita", "role": "owner",
    })
    assert bad_role.status_code == 400

    listed = (await client.get("/api/staff")).json()
    assert all("password" not in s for s in listed)
    assert (await client.delete(f"/api/staff/{staff['id']}")).json() == {"success": True}


# ---------- 部分更新拒绝 null ----------

@pytest.mark.parametrize("field", ["name", "sku", "unit_price", "is_active"])
async def test_product_update_rejects_null(client, make_product, field):
    product = await make_product(sku="NULL-1")

    resp = await client.put(f"/api/products/{product['id']}", json={field: None})
    assert resp.status_code == 400
    assert resp.json()["message"].startswith(f"Validation error: {field}:")
    assert (await client.get(f"/api/products/{product['id']}")).json()[field] == product[field]


async def test_product_update_allows_clearing_optional_fields(client, make_product):
    product = await make_product(sku="NULL-2", cost_price="60.00")

    resp = await client.put(f"/api/products/{product['id']}", json={"cost_price": None, "description": None})
    assert resp.status_code == 200
    assert resp.json()["cost_price"] is None


@pytest.mark.parametrize("field", ["title", "amount", "category", "vat_amount", "is_vat_applicable"])
async def test_expense_update_rejects_null(client, field):
    expense = (await client.post("/api/expenses", json={
        "title": "Rent", "amount": "1000.00", "category": "office",
    })).json()

    resp = await client.put(f"/api/expenses/{expense['id']}", json={field: None})
    assert resp.status_code == 400
    assert field in resp.json()["message"]
    assert Decimal((await client.get(f"/api/expenses/{expense['id']}")).json()["amount"]) == Decimal("1000")


@pytest.mark.parametrize("path, payload, field", [
    ("/api/categories", {"name": "Stationery"}, "name"),
    ("/api/customers", {"name": "Gita Traders"}, "name"),
    ("/api/suppliers", {"name": "Pokhara Mills"}, "is_active"),
    ("/api/staff", {"username": "gopal", "password": "secret1", "full_name": "Gopal"}, "role"),
])
async def test_update_rejects_null_on_required_fields(client, path, payload, field):
    created = await client.post(path, json=payload)
    assert created.status_code == 200, created.text

    resp = await client.put(f"{path}/{created.json()['id']}", json={field: None})
    assert resp.status_code == 400
    assert resp.json()["message"].startswith(f"Validation error: {field}:")


async def test_company_settings_update_rejects_null(client):
    resp = await client.put("/api/settings/company", json={"company_name": None})
    assert resp.status_code == 400
    assert (await client.get("/api/settings/company")).json()["company_name"] == "Your Company Name"
