"""
图片元数据API端点
带提示词下载与上传图片检查
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Response, UploadFile

from nanobanana_proxy.api.deps import get_image_metadata_handler
from nanobanana_proxy.schemas.image_metadata import DownloadRequest, InspectResponse
from nanobanana_proxy.services.image_metadata import ImageMetadataHandler

router = APIRouter(tags=["图片元数据"])


@router.post(
    "/download",
    summary="带提示词下载图片",
    description="把提示词写入图片元数据（EXIF，PNG 额外写入文本块）后以附件形式返回",
    response_class=Response,
)
async def download_with_prompt(
    body: DownloadRequest,
    handler: ImageMetadataHandler = Depends(get_image_metadata_handler)
) -> Response:
    payload = await handler.handle_download(body)
    return Response(
        content=payload.content,
        media_type=payload.media_type,
        headers={"Content-Disposition": payload.content_disposition},
    )


@router.post(
    "/inspect",
    response_model=InspectResponse,
    summary="检查图片元数据",
    description="读取上传图片的格式、尺寸和嵌入的提示词"
)
async def inspect_uploaded_image(
    image: Optional[UploadFile] = File(None, description="要检查的图片文件"),
    handler: ImageMetadataHandler = Depends(get_image_metadata_handler)
) -> InspectResponse:
    return await handler.handle_inspect(image)
