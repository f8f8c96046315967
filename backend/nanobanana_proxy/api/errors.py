"""
统一错误响应
所有错误都以 {"error": ..., "details"?: ...} 的形式返回
"""

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from nanobanana_proxy.core.log_utils import get_logger
from nanobanana_proxy.schemas.common import ErrorResponse

logger = get_logger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTPException -> {"error": detail}；detail 为字典时原样返回"""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = ErrorResponse(error=str(exc.detail)).model_dump(exclude_none=True)
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求体校验失败统一返回 400"""
    logger.warning(
        "请求参数校验失败",
        operation="request_validation_failed",
        path=request.url.path
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error="Invalid request", details=jsonable_encoder(exc.errors())).model_dump(),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
