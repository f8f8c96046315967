"""
图片元数据相关的Pydantic模型
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class DownloadRequest(BaseModel):
    """
    带提示词下载请求

    prompt 可以是字符串，也可以是 JSON 构建器生成的结构化对象
    """
    model_config = ConfigDict(populate_by_name=True)

    image_data: Optional[str] = Field(None, alias="imageData", description="base64 图片数据")
    prompt: Optional[Any] = Field(None, description="提示词")
    mime_type: Optional[str] = Field(None, alias="mimeType", description="目标格式")


class InspectResponse(BaseModel):
    """图片检查结果"""
    format: Optional[str] = None
    width: int
    height: int
    prompt: str
