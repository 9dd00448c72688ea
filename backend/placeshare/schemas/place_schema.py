# 장소 요청/응답 스키마 (Pydantic 모델)

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..models.place import Location, Place


class PlaceCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1)
    description: str = Field(min_length=5)
    address: str = Field(min_length=1)
    image: Optional[str] = None


class PlaceUpdate(BaseModel):
    # address/location/creator는 생성 후 변경 불가
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1)
    description: str = Field(min_length=5)
    image: Optional[str] = None


class PlacePublic(BaseModel):
    id: str
    title: str
    description: str
    image: str
    address: str
    location: Location
    creator: str

    @classmethod
    def from_document(cls, place: Place) -> "PlacePublic":
        return cls(
            id=str(place.id),
            title=place.title,
            description=place.description,
            image=place.image,
            address=place.address,
            location=Location(lat=place.location.lat, lng=place.location.lng),
            creator=str(place.creator),
        )


class PlaceResponse(BaseModel):
    place: PlacePublic


class PlaceListResponse(BaseModel):
    results: int
    places: List[PlacePublic]

    @classmethod
    def build(cls, places: List[Place]) -> "PlaceListResponse":
        return cls(results=len(places), places=[PlacePublic.from_document(p) for p in places])
