"""
应用配置管理模块
统一管理所有配置信息，包括环境变量和文件配置
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator, ConfigDict

from nanobanana_proxy.utils.config_utils import (
    get_workspace_path, get_config_path, parse_json_config
)


class Settings(BaseSettings):
    """应用配置类 - 统一管理所有配置信息"""

    # ==================== 基础配置 ====================
    app_name: str = "Nano Banana Proxy"
    app_version: str = "1.0.0"
    app_debug: bool = False
    app_env: str = "development"

    # ==================== API配置 ====================
    api_prefix: str = "/api"
    project_name: str = "Nano Banana Proxy API"

    # ==================== 访问控制 ====================
    site_access_key: str = "default-secret-key"

    # ==================== 生成提供商配置 ====================
    nanobanana_api_key: Optional[str] = None
    nanobanana_base_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    nanobanana_timeout: int = 120

    # ==================== B2存储配置 (S3兼容) ====================
    b2_application_key_id: str = ""
    b2_application_key: str = ""
    b2_endpoint: str = ""
    b2_region: str = "us-west-004"
    b2_bucket_name: str = ""
    b2_folder_prefix: str = "nanobanana"

    # ==================== Webhook配置 ====================
    custom_server_url: Optional[str] = None
    webhook_timeout: int = 30

    # ==================== 上传限制 ====================
    max_upload_size: int = 10485760  # 10MB

    # ==================== 日志配置 ====================
    log_level: str = "INFO"
    log_dir: str = "log"
    log_file: str = "server.log"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ==================== 应用服务配置 ====================
    app_port: int = 3000
    app_host: str = "0.0.0.0"

    # ==================== CORS配置 ====================
    cors_origins: str = '["*"]'

    # ==================== 验证器 ====================
    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, value: str) -> List[str]:
        """解析CORS origins配置"""
        return parse_json_config(value)

    # ==================== 计算属性 ====================
    @property
    def b2_enabled(self) -> bool:
        """检查B2存储是否启用"""
        return bool(self.b2_application_key_id and self.b2_application_key)

    @property
    def b2_endpoint_url(self) -> str:
        """构建B2 S3兼容端点URL"""
        return f"https://{self.b2_endpoint}"

    @property
    def webhook_enabled(self) -> bool:
        """检查Webhook是否启用"""
        return bool(self.custom_server_url)

    @property
    def absolute_log_dir(self) -> str:
        """获取绝对日志目录路径"""
        return str(get_workspace_path(self.log_dir))

    @property
    def absolute_log_file(self) -> str:
        """获取绝对日志文件路径"""
        return str(get_workspace_path(self.log_dir) / self.log_file)

    model_config = ConfigDict(
        env_file=get_config_path(".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
        validate_default=True
    )


def get_settings() -> Settings:
    """获取应用配置实例"""
    return Settings()


# 全局配置实例
settings = get_settings()
