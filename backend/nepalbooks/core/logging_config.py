"""
日志配置

控制台彩色输出，文件按天分为两份：
    app_<日期>.log    INFO 及以上
    error_<日期>.log  ERROR 及以上
"""

import logging
import sys
from datetime import date
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# 第三方库只保留 WARNING 以上
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "apscheduler": logging.WARNING,
    "aiosqlite": logging.WARNING,
}

# 文件名前缀 -> 最低级别
FILE_LOGS = (
    ("app", logging.INFO),
    ("error", logging.ERROR),
)


class ColoredFormatter(logging.Formatter):
    """控制台按级别着色"""

    COLORS = {
        logging.DEBUG: '\033[36m',
        logging.INFO: '\033[32m',
        logging.WARNING: '\033[33m',
        logging.ERROR: '\033[31m',
        logging.CRITICAL: '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # 同一条 record 还会交给文件处理器，这里改副本
        colored = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelno, "")
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _file_handler(log_path: Path, prefix: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(log_path / f"{prefix}_{date.today():%Y-%m-%d}.log", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def setup_logging(log_level: str = "INFO", log_dir: str = "logs") -> Path:
    """
    初始化根日志器，重复调用会替换已有处理器

    Args:
        log_level: DEBUG / INFO / WARNING / ERROR / CRITICAL，无法识别时用 INFO
        log_dir: 日志目录，不存在时创建

    Returns:
        日志目录
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ColoredFormatter(LOG_FORMAT, DATE_FORMAT))
    root.addHandler(console)

    for prefix, level in FILE_LOGS:
        root.addHandler(_file_handler(log_path, prefix, level))

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    logging.info(f"📋 日志系统初始化完成: level={log_level.upper()} dir={log_path}")
    return log_path


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
