"""
存储抽象基类
定义生成结果投递所需的存储接口
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional


@dataclass(frozen=True)
class UploadResult:
    """
    上传结果

    Attributes:
        key: 存储键
        url: 访问URL
        size: 文件大小（字节）
        mime_type: MIME类型
        bucket: 存储桶名称
        etag: 文件ETag
        uploaded_at: 上传时间
    """
    key: str
    url: str
    size: int
    mime_type: str
    bucket: Optional[str] = None
    etag: Optional[str] = None
    uploaded_at: Optional[datetime] = None


class BaseStorage(ABC):
    """存储抽象基类"""

    @abstractmethod
    async def upload(
        self,
        data: bytes,
        key: str,
        mime_type: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> UploadResult:
        """
        上传文件

        Args:
            data: 文件数据
            key: 存储键
            mime_type: MIME类型
            metadata: 可选的元数据

        Returns:
            UploadResult: 上传结果

        Raises:
            UploadError: 上传失败时抛出
        """
        ...

    @abstractmethod
    def build_url(self, key: str) -> str:
        """
        构建对象（或目录前缀）的公开访问URL

        Args:
            key: 存储键或目录前缀

        Returns:
            str: 访问URL
        """
        ...
