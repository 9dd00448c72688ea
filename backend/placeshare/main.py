# FastAPI 진입점
# - create_app(settings): 설정 객체를 명시적으로 받아 앱을 구성
# - lifespan: 로깅 설정, Beanie ODM 초기화 (MongoDB), 종료 시 연결 해제
# - 미들웨어: 오류 변환 -> 요청 로깅(dev) -> 보안 헤더 -> 요청 제한(/api) -> CORS
# - 라우터 등록 (/api/v1/places, /api/v1/users)

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.errors import register_exception_handlers
from .api.v1.places import router as places_router
from .api.v1.users import router as users_router
from .core.config import Settings, settings
from .core.database import close_db, init_db
from .core.logging import configure_logging
from .middleware.logging import RequestLoggingMiddleware
from .middleware.rate_limit import RateLimitMiddleware
from .middleware.security_headers import SecurityHeadersMiddleware

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: Settings = app.state.settings
    configure_logging(config.LOG_LEVEL)
    try:
        await init_db(config)
    except Exception as e:
        # MongoDB 연결 실패 시에도 서버는 시작됩니다 (헬스체크 응답 가능)
        logger.error(f"[Startup] MongoDB 연결 실패: {e}")
        logger.error(f"[Startup] MongoDB URI를 확인하세요: {config.MONGODB_URI}")
    yield
    close_db()


def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or settings

    app = FastAPI(
        title="Placeshare API",
        description="사용자 인증 + 주소 지오코딩 기반 장소 CRUD 서비스",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = config

    # 먼저 등록된 미들웨어가 가장 안쪽에서 실행됩니다
    register_exception_handlers(app)
    if config.ENV == "dev":
        app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=config.API_RATE_LIMIT,
        window_seconds=config.RATE_LIMIT_WINDOW_SECONDS,
    )
    # CORS 허용 도메인 세팅
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "app": config.APP_NAME, "version": VERSION}

    # API v1 라우터 등록
    app.include_router(places_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")
    return app


# uvicorn placeshare.main:app 으로 직접 실행할 때 사용
app = create_app()
