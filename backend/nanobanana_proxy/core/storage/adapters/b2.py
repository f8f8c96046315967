"""
Backblaze B2存储适配器
通过 S3 兼容接口（boto3）实现BaseStorage
"""

import asyncio
from datetime import datetime
from functools import partial
from typing import Callable, Dict, Optional, TypeVar

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from nanobanana_proxy.core.config import Settings, settings as default_settings
from nanobanana_proxy.core.log_utils import get_logger
from nanobanana_proxy.core.storage.base_storage import BaseStorage, UploadResult
from nanobanana_proxy.core.storage.exceptions import ConfigurationError, UploadError

logger = get_logger(__name__)

T = TypeVar('T')


class B2StorageAdapter(BaseStorage):
    """
    Backblaze B2存储适配器

    B2 提供 S3 兼容端点，直接使用 boto3 的 s3 客户端。
    boto3 是同步 SDK，所有调用都放到线程池中执行。
    """

    # 适配器名称，用于工厂模式注册
    ADAPTER_NAME: str = "b2"

    def __init__(self, config: Optional[Settings] = None, client=None) -> None:
        """
        初始化B2存储客户端

        Args:
            config: 应用配置，默认使用全局配置
            client: 预先构建的 S3 客户端（测试时注入）

        Raises:
            ConfigurationError: 配置不完整时抛出
        """
        self.config = config or default_settings

        if not self.config.b2_enabled:
            raise ConfigurationError("B2存储配置不完整，请检查 B2_APPLICATION_KEY_ID / B2_APPLICATION_KEY")
        if not self.config.b2_bucket_name or not self.config.b2_endpoint:
            raise ConfigurationError(
                "B2存储缺少 bucket 或 endpoint 配置",
                details={
                    "bucket": self.config.b2_bucket_name,
                    "endpoint": self.config.b2_endpoint
                }
            )

        self.bucket = self.config.b2_bucket_name
        self._client = client or self._create_client()

    def _create_client(self):
        """创建 S3 兼容客户端"""
        return boto3.client(
            "s3",
            endpoint_url=self.config.b2_endpoint_url,
            region_name=self.config.b2_region,
            aws_access_key_id=self.config.b2_application_key_id,
            aws_secret_access_key=self.config.b2_application_key,
        )

    async def _run_in_executor(self, func: Callable[..., T], **kwargs) -> T:
        """
        在线程池中运行同步函数

        Args:
            func: 同步函数
            **kwargs: 函数关键字参数

        Returns:
            函数执行结果
        """
        loop = asyncio.get_running_loop()
        bound_func = partial(func, **kwargs)
        return await loop.run_in_executor(None, bound_func)

    def build_url(self, key: str) -> str:
        return f"https://{self.bucket}.{self.config.b2_endpoint}/{key}"

    async def upload(
        self,
        data: bytes,
        key: str,
        mime_type: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> UploadResult:
        """
        上传文件到B2

        Raises:
            UploadError: 上传失败时抛出
        """
        upload_params = {
            'Bucket': self.bucket,
            'Key': key,
            'Body': data,
            'ContentType': mime_type
        }
        if metadata:
            upload_params['Metadata'] = metadata

        try:
            response = await self._run_in_executor(
                self._client.put_object,
                **upload_params
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "B2上传失败",
                operation="b2_upload_failed",
                key=key,
                exception=e
            )
            raise UploadError(
                f"上传文件失败: {e}",
                details={'key': key, 'bucket': self.bucket}
            ) from e

        return UploadResult(
            key=key,
            url=self.build_url(key),
            size=len(data),
            mime_type=mime_type,
            bucket=self.bucket,
            etag=(response or {}).get('ETag', '').strip('"'),
            uploaded_at=datetime.now()
        )
