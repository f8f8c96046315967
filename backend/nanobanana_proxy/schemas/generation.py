"""
图片生成相关的Pydantic模型
"""

from typing import Optional

from pydantic import BaseModel, Field


class ModelInfoResponse(BaseModel):
    """可用模型"""
    id: str
    name: str
    description: str = ""


class GenerateRequest(BaseModel):
    """
    图片生成请求

    prompt/model 允许为空，由处理器返回带具体原因的 400
    """
    prompt: Optional[str] = Field(None, description="提示词")
    model: Optional[str] = Field(None, description="模型ID")
    width: Optional[int] = Field(None, gt=0, description="期望宽度，用于推断宽高比")
    height: Optional[int] = Field(None, gt=0, description="期望高度，用于推断宽高比")
