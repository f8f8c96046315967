"""
提供商响应归一化
将各提供商不同结构的响应转换为统一的 GenerationResult

新增提供商时在 _RESPONSE_FAMILIES 中增加一个映射分支，下游只处理两种归一化结果
"""

from typing import Any, Callable, Dict, List, Optional, Tuple

from nanobanana_proxy.core.log_utils import get_logger
from .exceptions import UnrecognizedResponseShape
from .models import GenerationResult

logger = get_logger(__name__)

DEFAULT_PREDICTION_MIME_TYPE = "image/png"


def _first(items: Any) -> Optional[Dict[str, Any]]:
    """取列表第一个字典元素"""
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


def _normalize_content_parts(provider_name: str, raw: Dict[str, Any]) -> GenerationResult:
    """对话/内容式响应: candidates[0].content.parts[0]"""
    candidate = _first(raw.get("candidates"))
    content = candidate.get("content") if candidate else None
    part = _first(content.get("parts")) if isinstance(content, dict) else None

    if part is not None:
        inline_data = part.get("inlineData") or part.get("inline_data")
        if isinstance(inline_data, dict):
            return GenerationResult.inline_image(
                data=inline_data.get("data") or "",
                mime_type=inline_data.get("mimeType") or inline_data.get("mime_type") or "",
            )
        text = part.get("text")
        if isinstance(text, str) and text:
            return GenerationResult.text(text)

    raise UnrecognizedResponseShape(
        f"Unknown response format from {provider_name}",
        details={"provider": provider_name, "family": "content"}
    )


def _normalize_predictions(provider_name: str, raw: Dict[str, Any]) -> GenerationResult:
    """预测式响应: predictions[0].bytesBase64Encoded"""
    prediction = _first(raw.get("predictions"))
    if prediction is not None:
        encoded = prediction.get("bytesBase64Encoded")
        if isinstance(encoded, str) and encoded:
            return GenerationResult.inline_image(
                data=encoded,
                mime_type=prediction.get("mimeType") or DEFAULT_PREDICTION_MIME_TYPE,
            )

    raise UnrecognizedResponseShape(
        f"Unknown response format from {provider_name}",
        details={"provider": provider_name, "family": "predictions"}
    )


# (识别字段, 映射函数)，按优先级排列
_RESPONSE_FAMILIES: List[Tuple[str, Callable[[str, Dict[str, Any]], GenerationResult]]] = [
    ("candidates", _normalize_content_parts),
    ("predictions", _normalize_predictions),
]


def normalize(provider_name: str, raw_response: Any) -> GenerationResult:
    """
    将提供商原始响应归一化

    Args:
        provider_name: 提供商名称（用于错误信息和日志）
        raw_response: 提供商返回的 JSON 结构

    Returns:
        GenerationResult: 归一化结果

    Raises:
        UnrecognizedResponseShape: 响应结构无法识别或缺少可用负载
    """
    if isinstance(raw_response, dict):
        for marker, mapper in _RESPONSE_FAMILIES:
            if marker in raw_response:
                result = mapper(provider_name, raw_response)
                logger.debug(
                    "提供商响应归一化完成",
                    operation="normalize_response",
                    provider=provider_name,
                    family=marker,
                    kind=result.kind.value
                )
                return result

    logger.warning(
        "无法识别的提供商响应结构",
        operation="normalize_unrecognized",
        provider=provider_name,
        response_keys=list(raw_response.keys()) if isinstance(raw_response, dict) else type(raw_response).__name__
    )
    raise UnrecognizedResponseShape(
        f"Unknown response format from {provider_name}",
        details={"provider": provider_name}
    )
