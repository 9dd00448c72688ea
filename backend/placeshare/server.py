# 프로세스 실행 진입점
# - 로깅 설정 -> 앱 생성 -> uvicorn 서버 실행
# - 처리되지 않은 비동기 예외는 치명적 오류로 간주:
#   로그를 남기고 리스닝 소켓을 닫은 뒤 종료 코드 1로 종료 (재시작은 외부 프로세스 관리자 담당)

import asyncio
import logging
import sys

import uvicorn

from .core.config import settings
from .core.logging import configure_logging
from .main import create_app

logger = logging.getLogger(__name__)


async def serve(server: uvicorn.Server) -> int:
    loop = asyncio.get_running_loop()
    crashed = False

    def on_unhandled(loop: asyncio.AbstractEventLoop, context: dict) -> None:
        nonlocal crashed
        exc = context.get("exception")
        name = type(exc).__name__ if exc else "Error"
        logger.critical(f"{name}: {context.get('message') or exc}", exc_info=exc)
        logger.critical("UNHANDLED REJECTION! Shutting down....")
        crashed = True
        server.should_exit = True

    loop.set_exception_handler(on_unhandled)
    await server.serve()
    return 1 if crashed else 0


def run() -> None:
    configure_logging(settings.LOG_LEVEL)
    config = uvicorn.Config(create_app(settings), host=settings.HOST, port=settings.PORT, log_config=None)
    server = uvicorn.Server(config)
    logger.info(f"App running on port {settings.PORT}")
    sys.exit(asyncio.run(serve(server)))


if __name__ == "__main__":
    run()
