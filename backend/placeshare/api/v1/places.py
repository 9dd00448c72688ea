# 장소 라우터
# - GET    /api/v1/places            : 인증 불필요
# - GET    /api/v1/places/{pid}      : 인증 불필요
# - GET    /api/v1/places/user/{uid} : 인증 불필요
# - POST   /api/v1/places            : 인증 필요
# - PATCH  /api/v1/places/{pid}      : 인증 필요 (작성자 본인)
# - DELETE /api/v1/places/{pid}      : 인증 필요 (작성자 본인)

from fastapi import APIRouter, Depends, Response, status

from ...core.security import get_current_user
from ...models.user import User
from ...schemas.place_schema import PlaceCreate, PlaceListResponse, PlacePublic, PlaceResponse, PlaceUpdate
from ...services.place_service import PlaceService, get_place_service

router = APIRouter(prefix="/places", tags=["places"])


@router.get("", response_model=PlaceListResponse, summary="전체 장소 목록")
async def get_all_places(service: PlaceService = Depends(get_place_service)):
    places = await service.list_places()
    return PlaceListResponse.build(places)


@router.get("/user/{uid}", response_model=PlaceListResponse, summary="사용자가 등록한 장소 목록")
async def get_places_by_user_id(uid: str, service: PlaceService = Depends(get_place_service)):
    places = await service.get_places_by_user(uid)
    return PlaceListResponse.build(places)


@router.get("/{pid}", response_model=PlaceResponse, summary="장소 단건 조회")
async def get_place_by_id(pid: str, service: PlaceService = Depends(get_place_service)):
    place = await service.get_place(pid)
    return PlaceResponse(place=PlacePublic.from_document(place))


@router.post("", response_model=PlaceResponse, status_code=status.HTTP_201_CREATED,
             summary="장소 생성 (주소 지오코딩 포함, 로그인 필요)")
async def create_place(
    payload: PlaceCreate,
    user: User = Depends(get_current_user),
    service: PlaceService = Depends(get_place_service),
):
    place = await service.create_place(
        str(user.id), payload.title, payload.description, payload.address, payload.image
    )
    return PlaceResponse(place=PlacePublic.from_document(place))


@router.patch("/{pid}", response_model=PlaceResponse, summary="장소 수정 (작성자만)")
async def update_place(
    pid: str,
    payload: PlaceUpdate,
    user: User = Depends(get_current_user),
    service: PlaceService = Depends(get_place_service),
):
    place = await service.update_place(pid, str(user.id), payload.title, payload.description, payload.image)
    return PlaceResponse(place=PlacePublic.from_document(place))


@router.delete("/{pid}", status_code=status.HTTP_204_NO_CONTENT, summary="장소 삭제 (작성자만)")
async def delete_place(
    pid: str,
    user: User = Depends(get_current_user),
    service: PlaceService = Depends(get_place_service),
):
    await service.delete_place(pid, str(user.id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
