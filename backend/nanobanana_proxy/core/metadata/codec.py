"""
提示词元数据编解码
把提示词写入 JPEG/PNG 的元数据，并从任意上传图片中尽力读出提示词

写入位置:
    - EXIF: ImageDescription、XPComment（UTF-16LE）、UserComment（ASCII 字符码头）
    - PNG 额外写入文本块 parameters、description

读取顺序（命中即返回）:
    ImageDescription -> XPComment -> UserComment -> parameters -> description -> 其余文本块拼接
"""

import io
import json
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from PIL import ExifTags, Image, UnidentifiedImageError
from PIL.PngImagePlugin import PngInfo

from nanobanana_proxy.core.log_utils import get_logger
from .exceptions import ImageDecodingError, MetadataEncodingError, UnsupportedImageFormat
from .models import (
    FORMAT_JPEG,
    FORMAT_PNG,
    PNG_TEXT_DESCRIPTION,
    PNG_TEXT_PARAMETERS,
    ExtractedPrompt,
    ImageInspection,
    PromptMetadataBundle,
)

logger = get_logger(__name__)

T = TypeVar("T")

TAG_IMAGE_DESCRIPTION = int(ExifTags.Base.ImageDescription)
TAG_XP_COMMENT = int(ExifTags.Base.XPComment)
TAG_USER_COMMENT = int(ExifTags.Base.UserComment)
IFD_EXIF = int(ExifTags.IFD.Exif)

# UserComment 前 8 字节是字符编码标识
USER_COMMENT_ASCII_HEADER = b"ASCII\x00\x00\x00"
USER_COMMENT_UNDEFINED_HEADER = b"\x00" * 8

MIME_TO_FORMAT = {
    "image/jpeg": FORMAT_JPEG,
    "image/jpg": FORMAT_JPEG,
    "image/png": FORMAT_PNG,
}

JPEG_SAVE_MODES = ("RGB", "L", "CMYK")
PNG_SAVE_MODES = ("1", "L", "LA", "I", "I;16", "P", "RGB", "RGBA")
JPEG_QUALITY = 95

# JPEG 的 APP1 段上限，Pillow 超出时抛出 "EXIF data is too long"
JPEG_MAX_EXIF_BYTES = 65533

# Pillow 在解码/编码失败时可能抛出的异常
_PIL_ERRORS = (UnidentifiedImageError, OSError, ValueError, SyntaxError, Image.DecompressionBombError)


def resolve_image_format(mime_type: Optional[str]) -> str:
    """
    将 MIME 类型映射为容器格式

    Raises:
        UnsupportedImageFormat: 非 JPEG/PNG
    """
    normalized = (mime_type or "").split(";")[0].strip().lower()
    image_format = MIME_TO_FORMAT.get(normalized)
    if image_format is None:
        raise UnsupportedImageFormat(mime_type)
    return image_format


def normalize_prompt(prompt: Any) -> str:
    """
    将提示词统一为字符串

    字符串原样返回（包括空串），结构化对象（JSON 构建器的输出）序列化为紧凑 JSON
    """
    if isinstance(prompt, str):
        return prompt
    try:
        return json.dumps(prompt, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise MetadataEncodingError(
            "提示词无法序列化为JSON",
            details={"prompt_type": type(prompt).__name__}
        ) from e


def build_exif(prompt: str) -> Image.Exif:
    """构建包含三份提示词的 EXIF 块"""
    exif = Image.Exif()
    # ASCII 类型字段写入 UTF-8 字节，读取时按 latin-1 还原
    exif[TAG_IMAGE_DESCRIPTION] = prompt.encode("utf-8")
    exif[TAG_XP_COMMENT] = prompt.encode("utf-16-le") + b"\x00\x00"
    exif[IFD_EXIF] = {
        TAG_USER_COMMENT: USER_COMMENT_ASCII_HEADER + prompt.encode("utf-8"),
    }
    return exif


def build_png_info(bundle: PromptMetadataBundle) -> PngInfo:
    """构建 PNG 文本块，非 latin-1 文本由 Pillow 自动写为 iTXt"""
    png_info = PngInfo()
    for key, value in bundle.text_entries.items():
        png_info.add_text(key, value)
    return png_info


def _convert_for_png(image: Image.Image) -> Image.Image:
    # CMYK、YCbCr、LAB 等模式 PNG 无法直接写入
    return image.convert("RGBA" if "A" in image.getbands() else "RGB")


def embed(image_bytes: bytes, prompt: Any, mime_type: str) -> bytes:
    """
    将提示词写入图片元数据

    Args:
        image_bytes: 原始图片数据
        prompt: 提示词（字符串或结构化对象）
        mime_type: 目标格式，image/jpeg、image/jpg 或 image/png

    Returns:
        bytes: 新的图片数据，原数据不被修改

    Raises:
        UnsupportedImageFormat: 不支持的目标格式
        MetadataEncodingError: 图片无法解码或重新编码
    """
    image_format = resolve_image_format(mime_type)
    bundle = PromptMetadataBundle(prompt=normalize_prompt(prompt), image_format=image_format)
    exif_bytes = build_exif(bundle.prompt).tobytes()

    if image_format == FORMAT_JPEG and len(exif_bytes) > JPEG_MAX_EXIF_BYTES:
        logger.warning(
            "提示词过长，无法写入 JPEG EXIF",
            operation="metadata_embed_too_long",
            prompt_length=len(bundle.prompt),
            exif_bytes=len(exif_bytes)
        )
        raise MetadataEncodingError(
            "Prompt too long for JPEG EXIF, use image/png instead",
            details={"max_bytes": JPEG_MAX_EXIF_BYTES, "exif_bytes": len(exif_bytes)}
        )

    output = io.BytesIO()
    try:
        with Image.open(io.BytesIO(image_bytes)) as source:
            source.load()
            icc_profile = source.info.get("icc_profile")

            if image_format == FORMAT_JPEG:
                image = source if source.mode in JPEG_SAVE_MODES else source.convert("RGB")
                image.save(
                    output,
                    format=FORMAT_JPEG,
                    exif=exif_bytes,
                    icc_profile=icc_profile,
                    quality=JPEG_QUALITY,
                )
            else:
                image = source if source.mode in PNG_SAVE_MODES else _convert_for_png(source)
                image.save(
                    output,
                    format=FORMAT_PNG,
                    exif=exif_bytes,
                    pnginfo=build_png_info(bundle),
                )
    except _PIL_ERRORS as e:
        logger.error(
            "图片重新编码失败",
            operation="metadata_embed_failed",
            target_format=image_format,
            exception=e
        )
        raise MetadataEncodingError(
            f"Failed to re-encode image as {image_format}: {e}",
            details={"target_format": image_format}
        ) from e

    logger.debug(
        "提示词已写入图片元数据",
        operation="metadata_embed",
        target_format=image_format,
        prompt_length=len(bundle.prompt),
        output_size=output.tell()
    )
    return output.getvalue()


# ==================== 读取 ====================

def _safe_call(field_name: str, reader: Callable[[], T]) -> Optional[T]:
    """执行单个字段读取，任何错误都视为字段不存在"""
    try:
        return reader()
    except Exception as e:
        logger.warning(
            f"元数据字段解析失败: {field_name}",
            operation="metadata_field_parse_failed",
            field=field_name,
            error=str(e)
        )
        return None


def _recover_utf8(value: str) -> str:
    """Pillow 以 latin-1 解码 ASCII 字段，这里还原 UTF-8 写入的文本"""
    try:
        return value.encode("latin-1").decode("utf-8")
    except UnicodeError:
        return value


def _as_bytes(value: Any) -> Optional[bytes]:
    """BYTE/UNDEFINED 字段可能以 bytes、单元素元组或整数元组的形式返回"""
    if isinstance(value, bytes):
        return value
    if isinstance(value, tuple):
        if len(value) == 1 and isinstance(value[0], bytes):
            return value[0]
        if value and all(isinstance(item, int) for item in value):
            return bytes(value)
    return None


def _read_image_description(exif: Optional[Image.Exif]) -> Optional[str]:
    value = exif.get(TAG_IMAGE_DESCRIPTION) if exif is not None else None
    if isinstance(value, bytes):
        return value.rstrip(b"\x00").decode("utf-8")
    if isinstance(value, str):
        return _recover_utf8(value)
    return None


def _read_xp_comment(exif: Optional[Image.Exif]) -> Optional[str]:
    value = exif.get(TAG_XP_COMMENT) if exif is not None else None
    raw = _as_bytes(value)
    if raw is not None:
        return raw.decode("utf-16-le").replace("\x00", "")
    if isinstance(value, str):
        return value
    return None


def _read_user_comment(exif: Optional[Image.Exif]) -> Optional[str]:
    value = exif.get_ifd(IFD_EXIF).get(TAG_USER_COMMENT) if exif is not None else None
    raw = _as_bytes(value)
    if raw is not None:
        if raw.startswith((USER_COMMENT_ASCII_HEADER, USER_COMMENT_UNDEFINED_HEADER)):
            raw = raw[len(USER_COMMENT_ASCII_HEADER):]
        return raw.decode("utf-8").rstrip("\x00")
    if isinstance(value, str):
        return value
    return None


def _join_text_entries(text_entries: Optional[Dict[str, str]]) -> Optional[str]:
    """
    最后的兜底：拼接所有文本块

    这是启发式规则，可能把无关的元数据当作提示词返回
    """
    if not text_entries:
        return None
    values = [str(value) for value in text_entries.values() if value]
    return "\n".join(values) if values else None


def _read_exif(image: Image.Image) -> Image.Exif:
    return image.getexif()


def _read_text_entries(image: Image.Image) -> Dict[str, str]:
    # 只有 PNG 才有 text 属性，读取时会加载整个图片以获取 IDAT 之后的文本块
    return dict(getattr(image, "text", None) or {})


def _extract_from_image(image: Image.Image) -> ExtractedPrompt:
    """按优先级依次查找提示词"""
    exif = _safe_call("exif", lambda: _read_exif(image))
    text_entries = _safe_call("text", lambda: _read_text_entries(image)) or {}

    lookups: List[Tuple[str, Callable[[], Optional[str]]]] = [
        ("exif.ImageDescription", lambda: _read_image_description(exif)),
        ("exif.XPComment", lambda: _read_xp_comment(exif)),
        ("exif.UserComment", lambda: _read_user_comment(exif)),
        (f"text.{PNG_TEXT_PARAMETERS}", lambda: text_entries.get(PNG_TEXT_PARAMETERS)),
        (f"text.{PNG_TEXT_DESCRIPTION}", lambda: text_entries.get(PNG_TEXT_DESCRIPTION)),
        ("text.*", lambda: _join_text_entries(text_entries)),
    ]

    for field_name, reader in lookups:
        value = _safe_call(field_name, reader)
        if value:
            return ExtractedPrompt(found=True, text=value, source=field_name)

    return ExtractedPrompt.not_found()


def inspect_image(image_bytes: bytes) -> ImageInspection:
    """
    读取图片格式、尺寸与嵌入的提示词

    Raises:
        ImageDecodingError: 无法解析图片容器
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))
    except _PIL_ERRORS as e:
        raise ImageDecodingError(
            f"Failed to decode image: {e}",
            details={"size_bytes": len(image_bytes)}
        ) from e

    with image:
        prompt = _extract_from_image(image)
        inspection = ImageInspection(
            format=image.format.lower() if image.format else None,
            width=image.width,
            height=image.height,
            prompt=prompt,
        )

    logger.debug(
        "图片元数据检查完成",
        operation="metadata_inspect",
        image_format=inspection.format,
        found=prompt.found,
        source=prompt.source
    )
    return inspection


def extract(image_bytes: bytes) -> ExtractedPrompt:
    """
    从图片中提取嵌入的提示词

    单个字段解析失败时视为该字段不存在，只有图片容器本身无法解析时才抛出异常

    Raises:
        ImageDecodingError: 无法解析图片容器
    """
    return inspect_image(image_bytes).prompt
