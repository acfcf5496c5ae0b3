from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nepalbooks.api.api import api_router
from nepalbooks.core.config import Settings, settings as default_settings
from nepalbooks.core.logging_config import setup_logging, get_logger
from nepalbooks.db.init_db import prepare_database
from nepalbooks.db.session import build_engine, build_session_factory
from nepalbooks.services.scheduler import init_scheduler, shutdown_scheduler

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    settings: Settings = app.state.settings
    setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)

    # 启动时
    logger.info("🚀 应用启动中...")
    await prepare_database(app.state.engine, app.state.session_factory)
    init_scheduler(settings)
    yield
    # 关闭时
    logger.info("🛑 应用关闭中...")
    shutdown_scheduler()
    await app.state.engine.dispose()


def format_validation_error(exc: RequestValidationError) -> str:
    """取第一条校验错误：Validation error: <字段路径>: <原因>"""
    errors = exc.errors()
    if not errors:
        return "Validation error"
    first = errors[0]
    # 去掉 body / query / path 前缀
    loc = [str(part) for part in first.get("loc", ())[1:]]
    path = ".".join(loc) or "request"
    return f"Validation error: {path}: {first.get('msg', 'invalid value')}"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = format_validation_error(exc)
        logger.warning(f"{request.method} {request.url.path} -> {message}")
        return JSONResponse(status_code=400, content={"message": message})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} 处理失败: {exc}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """创建应用：引擎和会话工厂挂在 app.state 上"""
    settings = settings or default_settings

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        description="NepalBooks - small business accounting & inventory",
        lifespan=lifespan
    )

    engine = build_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # CORS配置
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        return {"message": f"{settings.PROJECT_NAME} API"}

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000, log_level="info")
