import os
import sys

import uvicorn

from nepalbooks.core.config import settings

if __name__ == "__main__":
    # 开发环境用 --reload 启动
    is_dev = "--reload" in sys.argv

    uvicorn.run(
        "nepalbooks.main:app",
        host=os.getenv("HOST", "127.0.0.1"),  # 默认只监听本地
        port=int(os.getenv("PORT", "8000")),
        reload=is_dev,
        log_level=settings.LOG_LEVEL.lower()
    )
