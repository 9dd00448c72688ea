# 사용자 저장소 레이어
# - 데이터 접근(조회/생성/수정/삭제)만 담당 (서비스 로직 분리)
# - 영속성 계층 오류는 그대로 전파 (분류는 api/errors.py에서)

from typing import Any, Dict, List, Optional

from beanie import PydanticObjectId
from motor.motor_asyncio import AsyncIOMotorClientSession

from ..models.user import User


class UserRepository:
    async def find_by_id(self, user_id: str) -> Optional[User]:
        return await User.get(PydanticObjectId(user_id))

    async def find_one(self, filters: Dict[str, Any]) -> Optional[User]:
        return await User.find_one(filters)

    async def find(self, filters: Optional[Dict[str, Any]] = None) -> List[User]:
        return await User.find(filters or {}).to_list()

    async def create(self, **fields: Any) -> User:
        user = User(**fields)
        return await user.insert()

    async def push_place(
        self,
        user_id: PydanticObjectId,
        place_id: PydanticObjectId,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> bool:
        result = await User.get_motor_collection().update_one(
            {"_id": user_id}, {"$push": {"places": place_id}}, session=session
        )
        return result.matched_count > 0

    async def pull_place(
        self,
        user_id: PydanticObjectId,
        place_id: PydanticObjectId,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> bool:
        result = await User.get_motor_collection().update_one(
            {"_id": user_id}, {"$pull": {"places": place_id}}, session=session
        )
        return result.matched_count > 0

    async def delete_by_id(self, user_id: str) -> bool:
        result = await User.find_one(User.id == PydanticObjectId(user_id)).delete()
        return bool(result and result.deleted_count)
