# 커스텀 예외 정의
# - 모든 도메인/영속성 오류는 ErrorKind 중 하나로 분류됩니다.
# - HTTP 상태 코드는 kind에 의해서만 결정됩니다 (api/errors.py 참고).

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION_FAILED = "validation_failed"
    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_ID = "invalid_id"
    UNAUTHENTICATED = "unauthenticated"
    INVALID_TOKEN = "invalid_token"
    INVALID_CREDENTIALS = "invalid_credentials"
    FORBIDDEN = "forbidden"
    DUPLICATE_EMAIL = "duplicate_email"
    DUPLICATE_PLACE_TITLE = "duplicate_place_title"
    CREATOR_NOT_FOUND = "creator_not_found"
    PLACE_NOT_FOUND = "place_not_found"
    NO_PLACES_FOUND = "no_places_found"
    ROUTE_NOT_FOUND = "route_not_found"
    GEOCODING_FAILED = "geocoding_failed"
    RATE_LIMITED = "rate_limited"
    PERSISTENCE_CAST = "persistence_cast"
    PERSISTENCE_VALIDATION = "persistence_validation"
    PERSISTENCE_DUPLICATE_KEY = "persistence_duplicate_key"
    PERSISTENCE_NOT_FOUND = "persistence_not_found"
    PERSISTENCE = "persistence"
    UNKNOWN = "unknown"


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_FAILED: 422,
    ErrorKind.MISSING_CREDENTIALS: 400,
    ErrorKind.INVALID_ID: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.INVALID_TOKEN: 401,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.DUPLICATE_EMAIL: 422,
    ErrorKind.DUPLICATE_PLACE_TITLE: 400,
    ErrorKind.CREATOR_NOT_FOUND: 404,
    ErrorKind.PLACE_NOT_FOUND: 404,
    ErrorKind.NO_PLACES_FOUND: 404,
    ErrorKind.ROUTE_NOT_FOUND: 404,
    ErrorKind.GEOCODING_FAILED: 422,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.PERSISTENCE_CAST: 400,
    ErrorKind.PERSISTENCE_VALIDATION: 400,
    ErrorKind.PERSISTENCE_DUPLICATE_KEY: 400,
    ErrorKind.PERSISTENCE_NOT_FOUND: 404,
    ErrorKind.PERSISTENCE: 500,
    ErrorKind.UNKNOWN: 500,
}

DEFAULT_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.VALIDATION_FAILED: "Invalid inputs passed, please check your data.",
    ErrorKind.MISSING_CREDENTIALS: "Please provide email and password!",
    ErrorKind.INVALID_ID: "Invalid creator ID.",
    ErrorKind.UNAUTHENTICATED: "You are not logged in. Log in to get access",
    ErrorKind.INVALID_TOKEN: "Invalid token. Please log in again.",
    ErrorKind.INVALID_CREDENTIALS: "Invalid credentials, could not log you in.",
    ErrorKind.FORBIDDEN: "You are not allowed to perform this action.",
    ErrorKind.DUPLICATE_EMAIL: "User exists already, please login instead.",
    ErrorKind.DUPLICATE_PLACE_TITLE: "You already have a place with the same title.",
    ErrorKind.CREATOR_NOT_FOUND: "We could not find user for provided id.",
    ErrorKind.PLACE_NOT_FOUND: "Could not find a place for the provided id.",
    ErrorKind.NO_PLACES_FOUND: "Could not find any place for the provided user id.",
    ErrorKind.ROUTE_NOT_FOUND: "Not found on this server!",
    ErrorKind.GEOCODING_FAILED: "Could not get coordinates for the provided address.",
    ErrorKind.RATE_LIMITED: "Too many requests from this IP, please try again in an hour!",
    ErrorKind.PERSISTENCE_CAST: "Invalid id.",
    ErrorKind.PERSISTENCE_VALIDATION: "Invalid input data.",
    ErrorKind.PERSISTENCE_DUPLICATE_KEY: "Duplicate field value. Please use another value.",
    ErrorKind.PERSISTENCE_NOT_FOUND: "Document not found",
    ErrorKind.PERSISTENCE: "A database error occurred.",
    ErrorKind.UNKNOWN: "An unknown error ocurred",
}


class AppError(Exception):
    """애플리케이션 전체에서 사용하는 단일 예외 타입

    kind 필드로 오류 종류를 구분합니다. isinstance 분기 대신
    kind 값으로 상태 코드와 메시지를 결정합니다.

    Attributes:
        kind: 오류 종류 (ErrorKind)
        message: 클라이언트에 그대로 전달되는 메시지
        context: 로그용 추가 정보 (응답 본문에는 포함되지 않음)
    """
    def __init__(self, kind: ErrorKind, message: Optional[str] = None, **context: Any):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        self.context: Dict[str, Any] = context
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"AppError(kind={self.kind.value!r}, message={self.message!r})"
