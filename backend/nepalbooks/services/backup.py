"""
SQLite 数据库文件备份
备份文件放在数据库文件同级的 backups/ 目录
"""

import os
import shutil
import logging
from datetime import datetime
from typing import Dict, List

from nepalbooks.core.config import Settings

logger = logging.getLogger(__name__)

AUTO_BACKUP_PREFIX = "auto_backup_"
MANUAL_BACKUP_PREFIX = "backup_"


def get_db_path(settings: Settings) -> str:
    """获取数据库文件路径"""
    return settings.database_path


def get_backup_dir(settings: Settings) -> str:
    """获取备份目录（不存在时创建）"""
    db_path = get_db_path(settings)
    backup_dir = os.path.join(os.path.dirname(os.path.abspath(db_path)), "backups")
    os.makedirs(backup_dir, exist_ok=True)
    return backup_dir


def _describe(filepath: str) -> Dict:
    stat = os.stat(filepath)
    return {
        "filename": os.path.basename(filepath),
        "size": stat.st_size,
        "size_display": f"{stat.st_size / 1024 / 1024:.2f} MB",
        "created_at": datetime.fromtimestamp(stat.st_mtime).isoformat(),
    }


def create_backup(settings: Settings, prefix: str = MANUAL_BACKUP_PREFIX) -> Dict:
    """复制数据库文件，返回备份信息"""
    db_path = get_db_path(settings)
    if not os.path.exists(db_path):
        raise FileNotFoundError(f"Database file not found: {db_path}")

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = os.path.join(get_backup_dir(settings), f"{prefix}{timestamp}.db")
    shutil.copy2(db_path, backup_path)
    return _describe(backup_path)


def list_backups(settings: Settings) -> List[Dict]:
    """备份列表，按时间倒序"""
    backup_dir = get_backup_dir(settings)
    backups = [
        _describe(os.path.join(backup_dir, filename))
        for filename in os.listdir(backup_dir)
        if filename.endswith(".db")
    ]
    backups.sort(key=lambda x: (x["created_at"], x["filename"]), reverse=True)
    return backups


def resolve_backup_file(settings: Settings, filename: str) -> str:
    """
    返回备份文件的绝对路径

    Raises:
        PermissionError: 路径跳出备份目录
        FileNotFoundError: 文件不存在
    """
    backup_dir_abs = os.path.abspath(get_backup_dir(settings))
    backup_path_abs = os.path.abspath(os.path.join(backup_dir_abs, filename))
    if os.path.dirname(backup_path_abs) != backup_dir_abs:
        raise PermissionError(filename)
    if not os.path.isfile(backup_path_abs):
        raise FileNotFoundError(filename)
    return backup_path_abs


def cleanup_old_backups(backup_dir: str, keep_count: int = 7) -> List[str]:
    """清理旧的自动备份，只保留最近的 N 个，返回被删除的文件名"""
    auto_backups = []
    for filename in os.listdir(backup_dir):
        if filename.startswith(AUTO_BACKUP_PREFIX) and filename.endswith(".db"):
            filepath = os.path.join(backup_dir, filename)
            auto_backups.append((os.stat(filepath).st_mtime, filename, filepath))

    # 最新的在前
    auto_backups.sort(reverse=True)

    removed = []
    for _, filename, filepath in auto_backups[keep_count:]:
        os.remove(filepath)
        removed.append(filename)
        logger.info(f"🗑️ 清理旧备份: {filename}")
    return removed
