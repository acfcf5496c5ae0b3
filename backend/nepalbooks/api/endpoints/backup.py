"""数据备份API - 单机版（无权限检查）"""

from typing import Any
from urllib.parse import unquote
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from nepalbooks.core.config import Settings
from nepalbooks.core.deps import get_settings
from nepalbooks.services.backup import (
    create_backup, get_backup_dir, list_backups, resolve_backup_file
)
from nepalbooks.services.scheduler import get_scheduler_status, trigger_backup_now

router = APIRouter()


@router.get("")
async def get_backups(*, settings: Settings = Depends(get_settings)) -> Any:
    """获取备份列表"""
    return {
        "backups": list_backups(settings),
        "backup_dir": get_backup_dir(settings),
    }


@router.post("/create")
async def create_manual_backup(*, settings: Settings = Depends(get_settings)) -> Any:
    """创建备份"""
    try:
        backup = create_backup(settings)
    except OSError as e:
        raise HTTPException(status_code=500, detail=f"Backup failed: {e}")
    return {"message": "Backup created", "backup": backup}


@router.get("/download/{filename}")
async def download_backup(
    *,
    settings: Settings = Depends(get_settings),
    filename: str) -> Any:
    """下载备份文件"""
    decoded_filename = unquote(filename)
    try:
        backup_path = resolve_backup_file(settings, decoded_filename)
    except PermissionError:
        raise HTTPException(status_code=403, detail="Access denied")
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Backup not found")

    return FileResponse(
        path=backup_path,
        filename=decoded_filename,
        media_type="application/octet-stream",
    )


@router.get("/scheduler")
async def get_backup_scheduler_status(*, settings: Settings = Depends(get_settings)) -> Any:
    """获取自动备份调度器状态"""
    return {
        "auto_backup": {
            "enabled": settings.AUTO_BACKUP_ENABLED,
            "schedule": f"{settings.AUTO_BACKUP_HOUR:02d}:{settings.AUTO_BACKUP_MINUTE:02d}",
            "keep_count": settings.AUTO_BACKUP_KEEP_COUNT,
        },
        "scheduler": get_scheduler_status(settings),
    }


@router.post("/trigger")
async def trigger_auto_backup(*, settings: Settings = Depends(get_settings)) -> Any:
    """立即执行一次自动备份（并按保留数量清理）"""
    trigger_backup_now(settings)
    return {"message": "Backup triggered"}
