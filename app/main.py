"""FastAPI应用主入口

配置应用实例、中间件、路由、异常处理和生命周期事件
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logging import setup_logging
from app.features.users import UserStore
from app.features.users import router as users_router
from app.shared.schemas import ErrorResponse, HealthCheckResponse, ServiceInfo


INVALID_BODY_ERROR = "Request body must be a JSON object"


def error_response(status_code: int, message: str) -> JSONResponse:
    """构造 {"error": message} 格式的错误响应"""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump()
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理

    用户数据只保存在内存中，启动和关闭时只记录日志
    """
    logger.info(f"正在启动 {settings.app_name} v{settings.app_version}...")
    logger.info(f"当前用户数量: {app.state.user_store.count()}")

    yield

    logger.info(f"正在关闭应用，丢弃{app.state.user_store.count()}个内存中的用户")


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP异常处理器

    包括业务异常（ValidationError、NotFoundError、ConflictError等）
    以及框架产生的404/405
    """
    error_type = getattr(exc, "error_type", "HTTPException")
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {error_type}: {exc.detail}")

    return error_response(exc.status_code, str(exc.detail))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求体解析失败处理器

    请求体不是合法的JSON时返回400
    """
    logger.warning(f"{request.method} {request.url.path} -> 400 请求体无法解析: {exc.errors()}")

    return error_response(400, INVALID_BODY_ERROR)


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """通用异常处理器

    处理未捕获的异常，避免暴露内部错误信息
    """
    logger.error(f"未处理的异常: {type(exc).__name__}: {str(exc)}")

    return error_response(500, str(exc) if settings.debug else "Internal server error")


def create_app(store: Optional[UserStore] = None) -> FastAPI:
    """创建并配置FastAPI应用

    Args:
        store: 应用持有的用户存储，未提供时创建一个新的空存储

    Returns:
        FastAPI: 配置完成的应用实例
    """
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(
        title=settings.app_name,
        description="基于FastAPI的内存用户目录服务",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.user_store = store if store is not None else UserStore()

    # 配置CORS中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 全局异常处理器
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        summary="健康检查",
        description="检查应用状态和当前用户数量"
    )
    async def health_check(request: Request) -> HealthCheckResponse:
        return HealthCheckResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc).isoformat(),
            version=settings.app_version,
            users=request.app.state.user_store.count()
        )

    @app.get(
        "/",
        response_model=ServiceInfo,
        summary="API信息",
        description="获取API基本信息"
    )
    async def root() -> ServiceInfo:
        return ServiceInfo(
            name=settings.app_name,
            version=settings.app_version,
            docs_url="/docs",
            health_url="/health"
        )

    # 注册路由
    app.include_router(
        users_router,
        prefix="/users",
        tags=["用户管理"]
    )

    return app


# 在导入时创建应用实例，方便uvicorn直接加载
app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info(f"启动开发服务器: {settings.app_name} v{settings.app_version}")

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if not settings.debug else "debug"
    )
