"""
通用Pydantic模型
用于标准化API响应
"""

from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """错误响应模型"""
    error: str
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str = "healthy"


class RootResponse(BaseModel):
    """根路径响应"""
    message: str
    version: str
    docs: str
