import os

from sqlalchemy import text

from nepalbooks.db.migrations import CURRENT_DB_VERSION, run_migrations
from nepalbooks.services.backup import AUTO_BACKUP_PREFIX, cleanup_old_backups
from nepalbooks.services.scheduler import trigger_backup_now


async def test_health_and_root(client):
    assert (await client.get("/health")).json() == {"status": "ok"}
    assert (await client.get("/")).json() == {"message": "NepalBooks API"}


async def test_unknown_route_uses_message_body(client):
    resp = await client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert "message" in resp.json()


# ---------- 迁移 ----------

async def test_migrations_are_idempotent(session):
    result = await run_migrations(session)
    assert result["old_version"] == CURRENT_DB_VERSION
    assert result["columns_added"] == []
    assert result["categories_created"] == 0
    assert result["company_settings_created"] is False


async def test_migrations_add_missing_columns(session):
    await session.execute(text("DROP TABLE sales"))
    await session.execute(text("DROP TABLE customers"))
    await session.execute(text("CREATE TABLE customers (id INTEGER PRIMARY KEY, name VARCHAR(100))"))
    await session.execute(text("INSERT INTO customers (id, name) VALUES (1, 'Legacy')"))
    await session.commit()

    result = await run_migrations(session)
    assert "customers.outstanding_balance" in result["columns_added"]
    balance = (await session.execute(text("SELECT outstanding_balance FROM customers WHERE id = 1"))).scalar()
    assert balance == 0


# ---------- 备份 ----------

async def test_backup_create_list_download(client, settings):
    created = await client.post("/api/backup/create")
    assert created.status_code == 200
    filename = created.json()["backup"]["filename"]
    assert filename.startswith("backup_")

    listing = (await client.get("/api/backup")).json()
    assert [b["filename"] for b in listing["backups"]] == [filename]
    assert os.path.dirname(settings.database_path) in listing["backup_dir"]

    download = await client.get(f"/api/backup/download/{filename}")
    assert download.status_code == 200
    assert download.content[:16] == b"SQLite format 3\x00"

    assert (await client.get("/api/backup/download/missing.db")).status_code == 404
    assert (await client.get("/api/backup/download/..%2Ftest.db")).status_code in (403, 404)


async def test_scheduler_status_when_disabled(client):
    status = (await client.get("/api/backup/scheduler")).json()
    assert status["auto_backup"]["enabled"] is False
    assert status["scheduler"]["running"] is False


async def test_auto_backup_keeps_newest(settings, app, tmp_path):
    for _ in range(3):
        trigger_backup_now(settings)

    backup_dir = tmp_path / "backups"
    auto_backups = [f for f in os.listdir(backup_dir) if f.startswith(AUTO_BACKUP_PREFIX)]
    assert len(auto_backups) == 3

    removed = cleanup_old_backups(str(backup_dir), keep_count=1)
    assert len(removed) == 2
    assert len([f for f in os.listdir(backup_dir) if f.startswith(AUTO_BACKUP_PREFIX)]) == 1
