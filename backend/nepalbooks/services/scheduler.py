"""
定时任务调度器服务
使用 APScheduler 实现每日自动备份
"""

import logging
from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from nepalbooks.core.config import Settings
from nepalbooks.services.backup import (
    AUTO_BACKUP_PREFIX, cleanup_old_backups, create_backup, get_backup_dir
)

logger = logging.getLogger(__name__)

# 全局调度器实例
scheduler: Optional[AsyncIOScheduler] = None


def auto_backup(settings: Settings):
    """执行自动备份任务"""
    try:
        backup = create_backup(settings, prefix=AUTO_BACKUP_PREFIX)
        logger.info(f"✅ 自动备份完成: {backup['filename']} ({backup['size_display']})")
    except FileNotFoundError as e:
        logger.warning(f"数据库文件不存在，跳过自动备份: {e}")
        return
    except OSError as e:
        logger.error(f"❌ 自动备份失败: {e}")
        return

    try:
        cleanup_old_backups(get_backup_dir(settings), keep_count=settings.AUTO_BACKUP_KEEP_COUNT)
    except OSError as e:
        logger.warning(f"清理旧备份时出错: {e}")


def init_scheduler(settings: Settings):
    """初始化并启动调度器"""
    global scheduler

    if not settings.AUTO_BACKUP_ENABLED:
        logger.info("📦 自动备份已禁用")
        return

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        auto_backup,
        trigger=CronTrigger(
            hour=settings.AUTO_BACKUP_HOUR,
            minute=settings.AUTO_BACKUP_MINUTE
        ),
        args=[settings],
        id="auto_backup",
        name="自动数据库备份",
        replace_existing=True
    )

    scheduler.start()
    logger.info(
        f"⏰ 定时任务调度器已启动 - 自动备份时间: 每天 "
        f"{settings.AUTO_BACKUP_HOUR:02d}:{settings.AUTO_BACKUP_MINUTE:02d}"
    )


def shutdown_scheduler():
    """关闭调度器"""
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("⏰ 定时任务调度器已关闭")


def get_scheduler_status(settings: Settings) -> dict:
    """获取调度器状态"""
    if not scheduler:
        return {
            "enabled": settings.AUTO_BACKUP_ENABLED,
            "running": False,
            "jobs": []
        }

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None
        })

    return {
        "enabled": settings.AUTO_BACKUP_ENABLED,
        "running": scheduler.running,
        "jobs": jobs
    }


def trigger_backup_now(settings: Settings):
    """立即触发一次备份（手动触发）"""
    auto_backup(settings)
