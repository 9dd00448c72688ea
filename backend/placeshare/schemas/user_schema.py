# 요청/응답 스키마 정의 (Pydantic 모델)

from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from ..models.user import User


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    # 비밀번호는 입력 그대로 해싱 (공백 제거 금지)
    password: str = Field(min_length=8)

    @field_validator("name", "email", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class UserLogin(BaseModel):
    # 누락된 값은 서비스에서 400으로 처리
    email: Optional[str] = None
    password: Optional[str] = None


class AuthUser(BaseModel):
    id: str
    email: EmailStr


class AuthResponse(BaseModel):
    token: str
    user: AuthUser

    @classmethod
    def build(cls, user: User, token: str) -> "AuthResponse":
        return cls(token=token, user=AuthUser(id=str(user.id), email=user.email))


class UserPublic(BaseModel):
    """클라이언트에 노출되는 사용자 정보 (비밀번호 해시 제외)"""
    id: str
    name: str
    email: EmailStr
    image: str
    places: List[str]

    @classmethod
    def from_document(cls, user: User) -> "UserPublic":
        return cls(
            id=str(user.id),
            name=user.name,
            email=user.email,
            image=user.image,
            places=[str(pid) for pid in user.places],
        )


class UserListResponse(BaseModel):
    users: List[UserPublic]


class LogoutResponse(BaseModel):
    status: str = "success"
