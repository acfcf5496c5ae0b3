"""
数据库版本迁移模块

在启动时自动检查并更新数据库结构，兼容旧版本的数据库文件，
并在空库中写入默认数据。

迁移策略：
1. 每次启动都检查所有必需的列，不依赖版本号
2. 公司设置为空时写入默认行，分类为空时写入默认分类
3. 版本号用于追踪，但不作为迁移的唯一依据
"""

import logging
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# 当前数据库版本 - 每次有重要更新时递增
CURRENT_DB_VERSION = "1.1.0"


async def get_db_version(db: AsyncSession):
    """获取数据库版本，如果没有版本记录则返回 None"""
    result = await db.execute(text(
        "SELECT value FROM system_config WHERE key = 'db_version'"
    ))
    row = result.fetchone()
    return row[0] if row else None


async def set_db_version(db: AsyncSession, version: str) -> None:
    """设置数据库版本"""
    await db.execute(text(
        "INSERT OR REPLACE INTO system_config (key, value) VALUES ('db_version', :version)"
    ), {"version": version})
    await db.commit()


async def ensure_system_config_table(db: AsyncSession) -> None:
    """确保 system_config 表存在"""
    await db.execute(text("""
        CREATE TABLE IF NOT EXISTS system_config (
            key TEXT PRIMARY KEY,
            value TEXT,
            updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
    """))
    await db.commit()


async def check_table_exists(db: AsyncSession, table: str) -> bool:
    """检查表是否存在"""
    result = await db.execute(
        text("SELECT name FROM sqlite_master WHERE type='table' AND name = :table"),
        {"table": table}
    )
    return result.fetchone() is not None


async def check_column_exists(db: AsyncSession, table: str, column: str) -> bool:
    """检查表中是否存在指定列"""
    result = await db.execute(text(f"PRAGMA table_info({table})"))
    return column in [row[1] for row in result.fetchall()]


async def add_column_if_not_exists(
    db: AsyncSession,
    table: str,
    column: str,
    column_type: str,
    default: str = None
) -> bool:
    """
    如果列不存在则添加

    返回值:
        True: 成功添加了列
        False: 表不存在或列已存在
    """
    if not await check_table_exists(db, table):
        logger.debug(f"表 {table} 不存在，跳过添加列 {column}")
        return False

    if await check_column_exists(db, table, column):
        return False

    sql = f"ALTER TABLE {table} ADD COLUMN {column} {column_type}"
    if default is not None:
        sql += f" DEFAULT {default}"
    await db.execute(text(sql))
    await db.commit()
    logger.info(f"[+] 已添加列: {table}.{column}")
    return True


# ========== 必需的数据库列定义 ==========
# 格式: (表名, 列名, 列类型, 默认值)
# 早期版本的数据库没有这些列
REQUIRED_COLUMNS = [
    ("customers", "outstanding_balance", "DECIMAL(12,2)", "0"),
    ("customers", "credit_limit", "DECIMAL(12,2)", "0"),
    ("suppliers", "outstanding_balance", "DECIMAL(12,2)", "0"),
    ("products", "min_stock_level", "INTEGER", "5"),
    ("expenses", "is_vat_applicable", "BOOLEAN", "0"),
    ("expenses", "vat_amount", "DECIMAL(12,2)", "0"),
]

DEFAULT_COMPANY_SETTINGS = {
    "company_name": "Your Company Name",
    "vat_rate": "13.00",
    "tax_year": "2080-81",
}

DEFAULT_CATEGORIES = [
    {"name": "Electronics", "description": "Electronic products and accessories"},
    {"name": "Clothing", "description": "Clothing and apparel"},
    {"name": "Home & Garden", "description": "Home and garden items"},
    {"name": "Books", "description": "Books and educational materials"},
]


async def ensure_all_columns(db: AsyncSession) -> list:
    """确保所有必需的列都存在，返回新增的列"""
    added = []
    for table, column, col_type, default in REQUIRED_COLUMNS:
        if await add_column_if_not_exists(db, table, column, col_type, default):
            added.append(f"{table}.{column}")
    return added


async def fix_null_fields(db: AsyncSession) -> None:
    """把旧数据中的 NULL 余额修正为 0"""
    for table in ("customers", "suppliers"):
        await db.execute(text(
            f"UPDATE {table} SET outstanding_balance = 0 WHERE outstanding_balance IS NULL"
        ))
    await db.commit()


async def ensure_company_settings(db: AsyncSession) -> bool:
    """公司设置为空时写入默认行"""
    count = (await db.execute(text("SELECT COUNT(*) FROM company_settings"))).scalar()
    if count:
        return False

    await db.execute(text("""
        INSERT INTO company_settings
        (company_name, vat_rate, tax_year, auto_vat_calculation, include_vat_in_price)
        VALUES (:company_name, :vat_rate, :tax_year, 1, 0)
    """), DEFAULT_COMPANY_SETTINGS)
    await db.commit()
    logger.info("已创建默认公司设置")
    return True


async def ensure_default_categories(db: AsyncSession) -> int:
    """分类表为空时写入默认分类，返回写入数量"""
    count = (await db.execute(text("SELECT COUNT(*) FROM categories"))).scalar()
    if count:
        return 0

    for category in DEFAULT_CATEGORIES:
        await db.execute(text("""
            INSERT INTO categories (name, description, created_at)
            VALUES (:name, :description, CURRENT_TIMESTAMP)
        """), category)
    await db.commit()
    logger.info(f"已创建 {len(DEFAULT_CATEGORIES)} 个默认分类")
    return len(DEFAULT_CATEGORIES)


async def run_migrations(db: AsyncSession) -> dict:
    """
    运行数据库迁移

    每次启动都检查所有必需列，不仅仅依赖版本号。
    失败时回滚并向上抛出，由启动流程决定如何处理。
    """
    result = {
        "old_version": None,
        "new_version": CURRENT_DB_VERSION,
        "columns_added": [],
        "company_settings_created": False,
        "categories_created": 0,
    }

    try:
        await ensure_system_config_table(db)

        current_version = await get_db_version(db)
        result["old_version"] = current_version
        logger.info(f"数据库版本检查: {current_version or '未知'} -> {CURRENT_DB_VERSION}")

        # 无论版本号是什么，都检查所有必需列
        result["columns_added"] = await ensure_all_columns(db)
        if not result["columns_added"]:
            logger.info("数据库结构完整，无需更新")

        await fix_null_fields(db)
        result["company_settings_created"] = await ensure_company_settings(db)
        result["categories_created"] = await ensure_default_categories(db)

        if current_version != CURRENT_DB_VERSION:
            await set_db_version(db, CURRENT_DB_VERSION)
            logger.info(f"数据库版本已更新为: {CURRENT_DB_VERSION}")
    except Exception as e:
        logger.error(f"数据库迁移出错: {e}")
        await db.rollback()
        raise

    return result
