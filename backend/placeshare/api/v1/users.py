# 사용자 라우터
# - GET  /api/v1/users        : 사용자 목록
# - POST /api/v1/users/signup : 회원가입 (토큰 발급)
# - POST /api/v1/users/login  : 로그인 (토큰 발급)
# - GET  /api/v1/users/logout : 로그아웃

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from ...schemas.user_schema import (
    AuthResponse,
    LogoutResponse,
    UserCreate,
    UserListResponse,
    UserLogin,
    UserPublic,
)
from ...services.user_service import UserService, get_user_service

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserListResponse, summary="사용자 목록")
async def get_all_users(service: UserService = Depends(get_user_service)):
    users = await service.list_users()
    return UserListResponse(users=[UserPublic.from_document(u) for u in users])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED,
             summary="회원가입 (이메일 중복 체크 포함)")
async def sign_up(payload: UserCreate, service: UserService = Depends(get_user_service)):
    user, token = await service.sign_up(payload.name, payload.email, payload.password)
    return AuthResponse.build(user, token)


@router.post("/login", response_model=AuthResponse, summary="로그인 (JWT 토큰 발급)")
async def log_in(payload: Optional[UserLogin] = None, service: UserService = Depends(get_user_service)):
    # 본문이 없으면 빈 자격 증명으로 처리 -> 400
    payload = payload or UserLogin()
    user, token = await service.log_in(payload.email, payload.password)
    return AuthResponse.build(user, token)


@router.get("/logout", response_model=LogoutResponse, summary="로그아웃")
async def log_out(response: Response):
    # 토큰은 클라이언트가 보관하므로 서버는 쿠키만 정리
    response.delete_cookie("jwt")
    return LogoutResponse()
