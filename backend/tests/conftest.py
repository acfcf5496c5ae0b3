"""
测试夹具

每个测试使用 tmp_path 下的独立 SQLite 文件，
通过 create_app(Settings(...)) 创建应用并显式执行建表和迁移。
"""

import pytest
from httpx import ASGITransport, AsyncClient

from nepalbooks.core.config import Settings
from nepalbooks.db.init_db import prepare_database
from nepalbooks.main import create_app


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        SQLITE_DATABASE_URI=f"sqlite:///{tmp_path / 'test.db'}",
        LOG_DIR=str(tmp_path / "logs"),
        AUTO_BACKUP_ENABLED=False,
        BACKEND_CORS_ORIGINS=[],
    )


@pytest.fixture()
async def app(settings):
    application = create_app(settings)
    await prepare_database(application.state.engine, application.state.session_factory)
    yield application
    await application.state.engine.dispose()


@pytest.fixture()
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
async def session(app):
    async with app.state.session_factory() as db:
        yield db


# ---------- 数据准备 ----------

@pytest.fixture()
def make_product(client):
    async def _make(sku="SKU-1", stock_quantity=10, unit_price="100.00", **extra):
        payload = {
            "name": extra.pop("name", f"Product {sku}"),
            "sku": sku,
            "unit_price": unit_price,
            "stock_quantity": stock_quantity,
            **extra,
        }
        resp = await client.post("/api/products", json=payload)
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _make


@pytest.fixture()
def make_customer(client):
    async def _make(name="Ram Traders", **extra):
        resp = await client.post("/api/customers", json={"name": name, **extra})
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _make


@pytest.fixture()
def make_supplier(client):
    async def _make(name="Kathmandu Wholesale", **extra):
        resp = await client.post("/api/suppliers", json={"name": name, **extra})
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _make
