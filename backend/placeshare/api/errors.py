# 오류 변환기 (Error Translator)
# - 모든 예외를 AppError로 분류하고 {"message": ...} 형식의 JSON 응답으로 변환
# - 상태 코드는 ErrorKind에 의해서만 결정됩니다
# - 응답이 이미 시작된 뒤의 예외는 두 번째 응답을 쓰지 않고 상위로 전달

import logging
import re

from beanie.exceptions import DocumentNotFound
from bson.errors import InvalidId
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.exceptions import AppError, ErrorKind

logger = logging.getLogger(__name__)

_QUOTED_VALUE = re.compile(r"([\"'])(?:(?=(\\?))\2.)*?\1")


def _duplicate_key_message(exc: DuplicateKeyError) -> str:
    details = exc.details or {}
    key_value = details.get("keyValue")
    if key_value:
        value = ", ".join(f"{k}: {v!r}" for k, v in key_value.items())
    else:
        match = _QUOTED_VALUE.search(details.get("errmsg") or str(exc))
        value = match.group(0) if match else "value"
    return f"Duplicate field value {value}. Please use another value."


def _validation_message(exc: ValidationError) -> str:
    errors = [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()]
    return f"Invalid input data in {len(errors)} field(s). {'. '.join(errors)}"


def translate_error(exc: BaseException) -> AppError:
    """예외를 AppError로 분류합니다.

    AppError는 그대로 통과하고, 영속성 계층 오류(잘못된 ObjectId, 스키마 검증,
    중복 키, 문서 없음)는 대응하는 kind로 바뀝니다. 그 외에는 UNKNOWN(500)입니다.
    """
    if isinstance(exc, AppError):
        return exc
    if isinstance(exc, InvalidId):
        return AppError(ErrorKind.PERSISTENCE_CAST, f"Invalid id: {exc}", cause=exc)
    if isinstance(exc, ValidationError):
        return AppError(ErrorKind.PERSISTENCE_VALIDATION, _validation_message(exc), cause=exc)
    if isinstance(exc, DuplicateKeyError):
        return AppError(ErrorKind.PERSISTENCE_DUPLICATE_KEY, _duplicate_key_message(exc), cause=exc)
    if isinstance(exc, DocumentNotFound):
        return AppError(ErrorKind.PERSISTENCE_NOT_FOUND, cause=exc)
    if isinstance(exc, PyMongoError):
        return AppError(ErrorKind.PERSISTENCE, cause=exc)
    return AppError(ErrorKind.UNKNOWN, str(exc) or None, cause=exc)


def error_response(error: AppError) -> JSONResponse:
    headers = None
    if error.kind in (ErrorKind.UNAUTHENTICATED, ErrorKind.INVALID_TOKEN):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=error.status_code, content={"message": error.message}, headers=headers)


def _log(error: AppError, request_path: str) -> None:
    if error.status_code >= 500:
        cause = error.context.get("cause")
        logger.error(
            f"[Error] {error.kind.value} on {request_path}: {error.message}",
            exc_info=cause if isinstance(cause, BaseException) else None,
        )
    else:
        logger.info(f"[Error] {error.kind.value} on {request_path}: {error.message}")


class ErrorTranslatorMiddleware:
    """라우트에서 처리되지 않은 예외를 JSON 오류 응답으로 바꾸는 ASGI 미들웨어"""

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                # 이미 응답 헤더가 전송됨: 두 번째 응답을 쓰지 않고 전달
                logger.error(f"[Error] response already started for {scope.get('path')}; forwarding", exc_info=exc)
                raise
            error = translate_error(exc)
            _log(error, scope.get("path", ""))
            await error_response(error)(scope, receive, send)


async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    _log(exc, request.url.path)
    return error_response(exc)


async def _handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        if loc and loc[-1] not in fields:
            fields.append(loc[-1])
    message = "Invalid inputs passed, please check your data."
    if fields:
        message = f"Invalid inputs passed, please check your data: {', '.join(fields)}"
    error = AppError(ErrorKind.VALIDATION_FAILED, message, fields=fields)
    _log(error, request.url.path)
    return error_response(error)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # 허용되지 않은 메서드도 라우트가 없는 것과 동일하게 처리
    if exc.status_code in (404, 405):
        error = AppError(ErrorKind.ROUTE_NOT_FOUND, f"Can't find {request.url.path} on this server!")
        _log(error, request.url.path)
        return error_response(error)
    return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)},
                        headers=getattr(exc, "headers", None))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _handle_app_error)
    app.add_exception_handler(RequestValidationError, _handle_request_validation)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_middleware(ErrorTranslatorMiddleware)
