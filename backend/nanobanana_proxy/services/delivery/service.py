"""
生成结果投递服务
图片生成成功后，把图片、提示词和请求元数据保存到 B2 并通知自定义服务器

投递失败只记录日志并在报告中标记为 "error"，不会影响生成接口的响应
"""

import asyncio
import base64
import json
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from nanobanana_proxy.core.config import Settings
from nanobanana_proxy.core.generation import GenerationResult
from nanobanana_proxy.core.log_messages import log_messages
from nanobanana_proxy.core.log_utils import get_logger
from nanobanana_proxy.core.metadata import normalize_prompt
from nanobanana_proxy.core.storage import BaseStorage, StorageError, get_storage_service

logger = get_logger(__name__)

STATUS_SUCCESS = "success"
STATUS_ERROR = "error"
WEBHOOK_EVENT = "image_generated"

_IMAGE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}


@dataclass
class DeliveryReport:
    """
    投递结果

    Attributes:
        b2: B2 目录URL；上传失败为 "error"；未启用为 None
        webhook: "success" / "error"；未配置为 None
    """
    b2: Optional[str] = None
    webhook: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"b2": self.b2, "webhook": self.webhook}


def image_extension(mime_type: Optional[str]) -> str:
    """根据 MIME 类型推断文件扩展名"""
    normalized = (mime_type or "").split(";")[0].strip().lower()
    if normalized in _IMAGE_EXTENSIONS:
        return _IMAGE_EXTENSIONS[normalized]
    subtype = normalized.rpartition("/")[2]
    return subtype or "bin"


def build_folder_name(prefix: str, now: Optional[datetime] = None) -> str:
    """生成 {prefix}/{YYYY-MM-DD}/{HH-MM-SS}-{8位十六进制} 形式的目录名"""
    now = now or datetime.now(timezone.utc)
    unique_id = secrets.token_hex(4)
    return f"{prefix}/{now:%Y-%m-%d}/{now:%H-%M-%S}-{unique_id}"


class DeliveryService:
    """生成结果投递服务"""

    def __init__(
        self,
        storage: Optional[BaseStorage] = None,
        webhook_url: Optional[str] = None,
        webhook_timeout: float = 30,
        folder_prefix: str = "nanobanana",
    ):
        self.storage = storage
        self.webhook_url = webhook_url
        self.webhook_timeout = webhook_timeout
        self.folder_prefix = folder_prefix

    @classmethod
    def from_settings(cls, settings: Settings) -> "DeliveryService":
        """
        根据配置构建投递服务

        B2 配置不完整时只记录警告，投递服务仍可用于 Webhook
        """
        try:
            storage = get_storage_service(config=settings)
        except StorageError as e:
            logger.warning(
                "B2存储初始化失败，已禁用B2投递",
                operation="delivery_storage_disabled",
                error=str(e)
            )
            storage = None

        if storage is None:
            logger.info("B2存储未启用", operation="delivery_storage_status", enabled=False)
        if settings.webhook_enabled:
            logger.info(
                "已配置自定义服务器Webhook",
                operation="delivery_webhook_status",
                webhook_url=settings.custom_server_url
            )

        return cls(
            storage=storage,
            webhook_url=settings.custom_server_url,
            webhook_timeout=settings.webhook_timeout,
            folder_prefix=settings.b2_folder_prefix,
        )

    @property
    def b2_enabled(self) -> bool:
        return self.storage is not None

    async def process_delivery(
        self,
        result: GenerationResult,
        prompt: Any,
        metadata: Dict[str, Any],
    ) -> DeliveryReport:
        """
        投递一次生成结果

        Args:
            result: 归一化的生成结果，只有 inline-image 结果会被投递
            prompt: 生成使用的提示词
            metadata: 请求元数据（ip、userAgent、timestamp、model、prompt）

        Returns:
            DeliveryReport: 投递结果
        """
        report = DeliveryReport()
        if not result.is_image:
            return report

        if self.b2_enabled:
            report.b2 = await self._upload_to_b2(result, prompt, metadata)

        if self.webhook_url:
            b2_folder = report.b2 if report.b2 != STATUS_ERROR else None
            report.webhook = await self._send_webhook(result, metadata, b2_folder)

        return report

    async def _upload_to_b2(
        self,
        result: GenerationResult,
        prompt: Any,
        metadata: Dict[str, Any],
    ) -> str:
        """并发上传图片、提示词和元数据，返回目录URL或 "error" """
        folder_name = build_folder_name(self.folder_prefix)
        image_bytes = base64.b64decode(result.data)
        prompt_bytes = normalize_prompt(prompt).encode("utf-8")
        metadata_bytes = json.dumps(metadata, ensure_ascii=False, indent=2).encode("utf-8")

        try:
            await asyncio.gather(
                self.storage.upload(
                    image_bytes,
                    f"{folder_name}/image.{image_extension(result.mime_type)}",
                    result.mime_type,
                ),
                self.storage.upload(prompt_bytes, f"{folder_name}/prompt.txt", "text/plain"),
                self.storage.upload(metadata_bytes, f"{folder_name}/metadata.json", "application/json"),
            )
        except StorageError as e:
            logger.error(
                log_messages.DELIVERY_B2_FAILED,
                operation="delivery_b2_failed",
                folder=folder_name,
                exception=e
            )
            return STATUS_ERROR

        folder_url = self.storage.build_url(f"{folder_name}/")
        logger.info(
            log_messages.DELIVERY_B2_SUCCESS,
            operation="delivery_b2_success",
            folder=folder_name
        )
        return folder_url

    async def _send_webhook(
        self,
        result: GenerationResult,
        metadata: Dict[str, Any],
        b2_folder: Optional[str],
    ) -> str:
        """把生成结果推送到自定义服务器"""
        payload = {
            "event": WEBHOOK_EVENT,
            "image_data": result.data,
            "mime_type": result.mime_type,
            "metadata": metadata,
            "b2_folder": b2_folder,
        }
        try:
            async with httpx.AsyncClient(timeout=self.webhook_timeout) as client:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                log_messages.DELIVERY_WEBHOOK_FAILED,
                operation="delivery_webhook_failed",
                webhook_url=self.webhook_url,
                exception=e
            )
            return STATUS_ERROR

        logger.info(
            log_messages.DELIVERY_WEBHOOK_SUCCESS,
            operation="delivery_webhook_success",
            status_code=response.status_code
        )
        return STATUS_SUCCESS
