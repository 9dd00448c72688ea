# 장소 저장소 레이어
# - Place 문서 CRUD
# - session 인자를 받는 메서드는 호출 측 트랜잭션에 참여

from typing import Any, Dict, List, Optional

from beanie import PydanticObjectId
from motor.motor_asyncio import AsyncIOMotorClientSession

from ..models.place import Place


class PlaceRepository:
    async def find_by_id(self, place_id: str) -> Optional[Place]:
        return await Place.get(PydanticObjectId(place_id))

    async def find_one(self, filters: Dict[str, Any]) -> Optional[Place]:
        return await Place.find_one(filters)

    async def find(self, filters: Optional[Dict[str, Any]] = None) -> List[Place]:
        return await Place.find(filters or {}).to_list()

    async def create(self, session: Optional[AsyncIOMotorClientSession] = None, **fields: Any) -> Place:
        place = Place(**fields)
        return await place.insert(session=session)

    async def update_one(self, place: Place, changes: Dict[str, Any]) -> Place:
        # validate_on_save=True 이므로 저장 전에 스키마 제약을 다시 검증
        # replace는 upsert하지 않음: 그 사이 삭제된 문서는 DocumentNotFound
        for field, value in changes.items():
            setattr(place, field, value)
        await place.replace()
        return place

    async def delete_by_id(
        self,
        place_id: PydanticObjectId,
        session: Optional[AsyncIOMotorClientSession] = None,
    ) -> bool:
        result = await Place.get_motor_collection().delete_one({"_id": place_id}, session=session)
        return result.deleted_count > 0
