"""
Nano Banana Proxy - FastAPI主应用
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nanobanana_proxy.api.errors import register_exception_handlers
from nanobanana_proxy.api.router import api_router
from nanobanana_proxy.core.config import Settings, settings
from nanobanana_proxy.core.generation import build_model_registry
from nanobanana_proxy.core.log_utils import setup_logging, get_logger
from nanobanana_proxy.schemas.common import HealthResponse, RootResponse
from nanobanana_proxy.services.delivery import DeliveryService

# 初始化日志系统
setup_logging()

# 在导入其他模块之前完成日志设置
logger = get_logger(__name__)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    创建FastAPI应用

    Args:
        app_settings: 应用配置，默认使用全局配置（测试时可传入自定义配置）
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """应用生命周期管理：启动时构建模型注册表与投递服务，关闭时释放连接"""
        logger.info("应用启动中...")

        app.state.settings = app_settings
        app.state.registry = build_model_registry(app_settings)
        app.state.delivery = DeliveryService.from_settings(app_settings)

        logger.info(
            "应用启动完成",
            operation="app_startup",
            model_count=len(app.state.registry.get_models()),
            b2_enabled=app.state.delivery.b2_enabled,
            webhook_enabled=app_settings.webhook_enabled
        )

        yield

        await app.state.registry.close()
        logger.info("应用关闭")

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.app_version,
        description="Nano Banana 图片生成代理，支持提示词元数据写入与读取",
        openapi_url=f"{app_settings.api_prefix}/openapi.json",
        docs_url=f"{app_settings.api_prefix}/docs",
        redoc_url=f"{app_settings.api_prefix}/redoc",
        lifespan=lifespan
    )

    # 添加CORS中间件 - 确保在所有路由之前添加
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"]
    )

    register_exception_handlers(app)

    # 注册API路由
    app.include_router(api_router, prefix=app_settings.api_prefix)

    @app.get("/", response_model=RootResponse)
    def read_root():
        """根路径"""
        return RootResponse(
            message=app_settings.app_name,
            version=app_settings.app_version,
            docs=f"{app_settings.api_prefix}/docs"
        )

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """健康检查"""
        return HealthResponse()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
        log_level=settings.log_level.lower()
    )
