# User 도메인 모델 (Beanie Document)
# - 이름, 이메일, 비밀번호 해시, 프로필 이미지, 소유한 장소 id 목록
# - 이메일은 소문자로 저장되며 unique 인덱스

from typing import List

from beanie import Document, Indexed, PydanticObjectId
from pydantic import EmailStr, Field, field_validator


class User(Document):
    name: str = Field(min_length=1)
    email: Indexed(EmailStr, unique=True)  # 중복 방지 인덱스
    password_hash: str = Field(repr=False)
    image: str
    places: List[PydanticObjectId] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    class Settings:
        name = "users"  # 컬렉션명
        validate_on_save = True
