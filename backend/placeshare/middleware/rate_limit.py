# IP별 요청 제한 미들웨어
# - /api 로 시작하는 경로에만 적용
# - 슬라이딩 윈도우: 최근 window_seconds 동안의 요청 수를 센다
# - 단일 프로세스 메모리 기반 (여러 워커 간에는 공유되지 않음)

import logging
import time
from collections import defaultdict
from typing import Dict, List

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ..api.errors import error_response
from ..core.exceptions import AppError, ErrorKind

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, max_requests: int = 100, window_seconds: int = 3600, path_prefix: str = "/api"):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.path_prefix = path_prefix
        self._requests: Dict[str, List[float]] = defaultdict(list)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()
        window_start = now - self.window_seconds

        recent = [ts for ts in self._requests[client_ip] if ts > window_start]
        self._requests[client_ip] = recent

        if len(recent) >= self.max_requests:
            retry_after = int(recent[0] + self.window_seconds - now) + 1
            logger.warning(
                f"[RateLimit] {client_ip}: {len(recent)} requests in {self.window_seconds}s window"
            )
            response = error_response(AppError(ErrorKind.RATE_LIMITED))
            response.headers["Retry-After"] = str(retry_after)
            return response

        recent.append(now)

        # 오래된 IP 항목 정리 (메모리 누수 방지)
        if len(self._requests) > 1000:
            self._cleanup(window_start)

        return await call_next(request)

    def _cleanup(self, window_start: float) -> None:
        inactive = [ip for ip, stamps in self._requests.items() if not stamps or stamps[-1] <= window_start]
        for ip in inactive:
            del self._requests[ip]
