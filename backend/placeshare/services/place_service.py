# 장소 서비스 레이어
# - 장소 조회 (전체, id, 사용자별)
# - 장소 생성: 입력 검증 -> 작성자 확인 -> 제목 중복 체크 -> 지오코딩 -> 트랜잭션(장소 저장 + 사용자 places에 추가)
# - 장소 수정/삭제: 작성자 본인만 가능

import logging
from typing import Any, AsyncContextManager, Callable, Dict, List, Optional

from beanie import PydanticObjectId
from bson import ObjectId
from fastapi import Depends, Request

from ..core.config import Settings
from ..core.database import get_transaction
from ..core.exceptions import AppError, ErrorKind
from ..models.place import Place
from ..repositories.place_repository import PlaceRepository
from ..repositories.user_repository import UserRepository
from .geocoding_service import GeocodingClient, get_geocoding_client

logger = logging.getLogger(__name__)

MIN_DESCRIPTION_LENGTH = 5

TransactionFactory = Callable[[], AsyncContextManager[Any]]


def validate_place_fields(title: Optional[str], description: Optional[str], address: Optional[str] = None,
                          require_address: bool = True) -> None:
    invalid = []
    if not (title or "").strip():
        invalid.append("title")
    if len((description or "").strip()) < MIN_DESCRIPTION_LENGTH:
        invalid.append("description")
    if require_address and not (address or "").strip():
        invalid.append("address")
    if invalid:
        raise AppError(
            ErrorKind.VALIDATION_FAILED,
            f"Invalid inputs passed, please check your data: {', '.join(invalid)}",
            fields=invalid,
        )


class PlaceService:
    def __init__(
        self,
        places: PlaceRepository,
        users: UserRepository,
        geocoder: GeocodingClient,
        transaction: TransactionFactory,
        config: Settings,
    ):
        self.places = places
        self.users = users
        self.geocoder = geocoder
        self.transaction = transaction
        self.config = config

    async def list_places(self) -> List[Place]:
        return await self.places.find()

    async def get_place(self, place_id: str) -> Place:
        place = await self.places.find_by_id(place_id)
        if not place:
            raise AppError(ErrorKind.PLACE_NOT_FOUND)
        return place

    async def get_places_by_user(self, user_id: str) -> List[Place]:
        places = await self.places.find({"creator": PydanticObjectId(user_id)})
        # 빈 결과도 404로 응답 (기존 클라이언트와의 호환)
        if not places:
            raise AppError(ErrorKind.NO_PLACES_FOUND)
        return places

    async def create_place(
        self,
        creator_id: str,
        title: str,
        description: str,
        address: str,
        image: Optional[str] = None,
    ) -> Place:
        validate_place_fields(title, description, address)
        title, description, address = title.strip(), description.strip(), address.strip()

        if not ObjectId.is_valid(creator_id):
            raise AppError(ErrorKind.INVALID_ID)
        creator = await self.users.find_by_id(creator_id)
        if not creator:
            raise AppError(ErrorKind.CREATOR_NOT_FOUND)

        # 동시에 같은 제목으로 생성하면 둘 다 이 체크를 통과할 수 있음
        # -> (creator, title) unique 인덱스가 DuplicateKeyError로 막습니다
        existing = await self.places.find_one({"creator": creator.id, "title": title})
        if existing:
            raise AppError(ErrorKind.DUPLICATE_PLACE_TITLE)

        location = await self.geocoder.resolve(address)

        async with self.transaction() as session:
            place = await self.places.create(
                session=session,
                title=title,
                description=description,
                address=address,
                image=image or self.config.DEFAULT_PLACE_IMAGE,
                location=location,
                creator=creator.id,
            )
            linked = await self.users.push_place(creator.id, place.id, session=session)
            if not linked:
                # 예외로 트랜잭션을 중단시켜 장소 저장도 롤백
                raise AppError(ErrorKind.CREATOR_NOT_FOUND)

        logger.info(f"[PlaceService] 장소 생성 완료: {place.id} (creator={creator.id})")
        return place

    async def update_place(
        self,
        place_id: str,
        requester_id: str,
        title: str,
        description: str,
        image: Optional[str] = None,
    ) -> Place:
        validate_place_fields(title, description, require_address=False)

        place = await self.get_place(place_id)
        if str(place.creator) != str(requester_id):
            raise AppError(ErrorKind.FORBIDDEN, "You are not allowed to update this place.")

        changes: Dict[str, Any] = {"title": title.strip(), "description": description.strip()}
        if image is not None:
            changes["image"] = image
        return await self.places.update_one(place, changes)

    async def delete_place(self, place_id: str, requester_id: str) -> None:
        place = await self.get_place(place_id)
        if str(place.creator) != str(requester_id):
            raise AppError(ErrorKind.FORBIDDEN, "You are not allowed to delete this place.")

        async with self.transaction() as session:
            await self.users.pull_place(place.creator, place.id, session=session)
            await self.places.delete_by_id(place.id, session=session)
        logger.info(f"[PlaceService] 장소 삭제 완료: {place.id}")


def get_place_service(
    request: Request,
    places: PlaceRepository = Depends(PlaceRepository),
    users: UserRepository = Depends(UserRepository),
    geocoder: GeocodingClient = Depends(get_geocoding_client),
    transaction: TransactionFactory = Depends(get_transaction),
) -> PlaceService:
    return PlaceService(places, users, geocoder, transaction, request.app.state.settings)
