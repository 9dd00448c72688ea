# Place 도메인 모델 (Beanie Document)
# - 주소를 지오코딩한 좌표(location)를 함께 저장
# - (creator, title) 복합 unique 인덱스: 한 사용자가 같은 제목의 장소를 두 개 가질 수 없음

from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field, field_validator
from pymongo import ASCENDING, IndexModel


class Location(BaseModel):
    lat: float
    lng: float


class Place(Document):
    title: str = Field(min_length=1)
    description: str = Field(min_length=5)
    image: str
    address: str = Field(min_length=1)
    location: Location
    creator: PydanticObjectId

    @field_validator("title", "description", "address", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    class Settings:
        name = "places"
        validate_on_save = True
        indexes = [
            IndexModel([("creator", ASCENDING), ("title", ASCENDING)], unique=True, name="creator_title_unique"),
        ]
