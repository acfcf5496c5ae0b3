from decimal import Decimal
from typing import List, Union
import logging

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    PROJECT_NAME: str = "NepalBooks"
    API_PREFIX: str = "/api"

    # CORS配置
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:5000",
        "http://127.0.0.1:5000",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # 数据库配置
    SQLITE_DATABASE_URI: str = "sqlite:///./nepalbooks.db"
    SQL_DEBUG: bool = False

    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # 税务与库存默认值
    DEFAULT_VAT_RATE: Decimal = Field(default=Decimal("13.00"), ge=0, description="默认增值税率（%）")
    DEFAULT_MIN_STOCK_LEVEL: int = Field(default=5, ge=0, description="未设置最低库存时的预警线")
    # 仪表盘本月费用：默认只比较月份（兼容旧版行为），开启后同时比较年份
    DASHBOARD_MONTH_MATCH_YEAR: bool = False

    # 自动备份配置
    AUTO_BACKUP_ENABLED: bool = True  # 是否启用自动备份
    AUTO_BACKUP_HOUR: int = Field(default=3, ge=0, le=23)  # 每天备份时间（小时）
    AUTO_BACKUP_MINUTE: int = Field(default=0, ge=0, le=59)  # 每天备份时间（分钟）
    AUTO_BACKUP_KEEP_COUNT: int = Field(default=7, ge=1)  # 保留最近多少个自动备份

    class Config:
        case_sensitive = True
        env_file = ".env"

    @property
    def async_database_uri(self) -> str:
        """aiosqlite 驱动的连接串"""
        return self.SQLITE_DATABASE_URI.replace("sqlite:///", "sqlite+aiosqlite:///")

    @property
    def database_path(self) -> str:
        """SQLite 数据库文件路径"""
        db_url = self.SQLITE_DATABASE_URI
        if db_url.startswith("sqlite+aiosqlite:///"):
            return db_url.replace("sqlite+aiosqlite:///", "")
        if db_url.startswith("sqlite:///"):
            return db_url.replace("sqlite:///", "")
        raise ValueError(f"Unsupported database URI: {db_url}")


settings = Settings()
logger.info(f"加载配置: API_PREFIX={settings.API_PREFIX}, CORS={settings.BACKEND_CORS_ORIGINS}")
