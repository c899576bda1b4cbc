"""
披萨店 POS 计价服务 - 主应用入口
提供可定制菜品（披萨、炸鸡）的计价与购物车组装API

主要功能模块：
- 菜单目录查询
- 披萨计价（尺寸/饼底、配料用量与摆放、特色模板、替换抵扣）
- 炸鸡计价
- 购物车条目组装

技术栈：FastAPI + DuckDB + Pydantic
"""

import logging
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from contextlib import asynccontextmanager

from .core.database import db_manager
from .core.exceptions import BaseApplicationError, DatabaseError
from .core.logging import setup_logging
from .core.error_handler import (
    application_error_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler
)
from .config.settings import settings
from .api import api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    setup_logging(settings.log_level)
    # 启动时初始化数据库
    try:
        db_manager.init_database()
        logger.info("Database initialized: %s", db_manager.db_path)
    except DatabaseError as e:
        # 不要让应用启动失败，允许在运行时重试
        logger.error("Database initialization failed: %s", e.message)

    yield

    db_manager.close()


def create_app() -> FastAPI:
    """创建FastAPI应用"""
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="披萨店POS计价API",
        debug=settings.debug,
        lifespan=lifespan
    )

    # 添加中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # 在生产环境中应该限制具体域名
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 注册异常处理器
    app.add_exception_handler(BaseApplicationError, application_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # 注册路由
    app.include_router(api_router, prefix=settings.api_prefix)

    # 健康检查
    @app.get("/health")
    async def health_check():
        try:
            db_manager.get_connection()
            return {
                "status": "healthy",
                "version": settings.api_version,
                "database": "connected"
            }
        except DatabaseError as e:
            return {
                "status": "unhealthy",
                "version": settings.api_version,
                "database": f"error: {e.message}"
            }

    @app.get("/")
    async def root():
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "description": "披萨店POS计价API"
        }

    return app

# 应用实例
app = create_app()
