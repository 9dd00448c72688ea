# MongoDB 연결 관리
# - Beanie ODM 초기화 (앱 시작 시 1회)
# - 트랜잭션 컨텍스트 제공 (장소 생성/삭제의 두 쓰기를 묶음)

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from beanie import init_beanie
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession

from .config import Settings
from ..models.place import Place
from ..models.user import User

logger = logging.getLogger(__name__)

_client: Optional[AsyncIOMotorClient] = None
_use_transactions: bool = True


async def init_db(config: Settings) -> AsyncIOMotorClient:
    global _client, _use_transactions
    # serverSelectionTimeoutMS: 5초 안에 서버를 찾지 못하면 타임아웃
    client = AsyncIOMotorClient(config.MONGODB_URI, serverSelectionTimeoutMS=5000)
    await client.admin.command("ping")

    db = client.get_default_database()
    await init_beanie(database=db, document_models=[User, Place])

    _client = client
    _use_transactions = config.MONGODB_TRANSACTIONS
    if not _use_transactions:
        logger.warning("[Database] MONGODB_TRANSACTIONS=false: 장소 생성/삭제가 트랜잭션 없이 실행됩니다.")
    logger.info(f"[Database] MongoDB 연결 성공: {db.name}")
    return client


def close_db() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
        logger.info("[Database] MongoDB 연결 종료")


@asynccontextmanager
async def start_transaction() -> AsyncIterator[Optional[AsyncIOMotorClientSession]]:
    """모든 쓰기가 성공하면 커밋, 예외가 발생하면 중단(abort)되는 트랜잭션

    yield된 session을 각 repository 메서드에 넘겨야 같은 트랜잭션에 묶입니다.
    트랜잭션이 비활성화된 경우 session 대신 None을 돌려줍니다.
    """
    if _client is None:
        raise RuntimeError("Database is not initialized; call init_db() first")
    if not _use_transactions:
        yield None
        return
    async with await _client.start_session() as session:
        async with session.start_transaction():
            yield session


def get_transaction():
    # FastAPI 의존성: 테스트에서 가짜 트랜잭션으로 교체할 수 있도록 분리
    return start_transaction
