"""Schema 公共校验"""
from typing import Any


def ensure_not_null(v: Any) -> Any:
    """部分更新时显式传入 null 的非空字段直接拒绝"""
    if v is None:
        raise ValueError("cannot be null")
    return v
