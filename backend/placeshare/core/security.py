# 보안/인증 유틸리티
# - 비밀번호 해싱/검증
# - JWT 토큰 생성/검증
# - 현재 사용자 가져오기(의존성): 보호된 라우트에서만 실행

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import jwt
from bson.errors import InvalidId
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from passlib.context import CryptContext

from .config import settings
from .exceptions import AppError, ErrorKind
from ..models.user import User
from ..repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS)
# auto_error=False: 헤더가 없을 때의 응답도 AppError로 통일
bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_token(subject: dict, expires_delta: timedelta) -> str:
    now = datetime.now(tz=timezone.utc)
    payload = {
        "exp": now + expires_delta,
        "iat": now,
        "nbf": now,
        **subject,
    }
    token = jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token


def create_access_token(user_id: str, email: str) -> str:
    return create_token(
        {"userId": str(user_id), "email": email, "type": "access"},
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def decode_access_token(token: str) -> Dict[str, str]:
    """토큰을 검증하고 {userId, email}을 돌려줍니다.

    서명 불일치, 형식 오류, 만료, 필수 클레임 누락은 모두 INVALID_TOKEN입니다.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AppError(ErrorKind.INVALID_TOKEN, "Your token has expired. Please log in again.", cause=exc)
    except jwt.PyJWTError as exc:
        raise AppError(ErrorKind.INVALID_TOKEN, cause=exc)

    user_id = payload.get("userId")
    if payload.get("type") != "access" or not user_id:
        raise AppError(ErrorKind.INVALID_TOKEN)
    return {"userId": user_id, "email": payload.get("email")}


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    repo: UserRepository = Depends(UserRepository),
) -> User:
    # Authorization: Bearer <token> 파싱 및 사용자 조회
    if credentials is None or not credentials.credentials:
        raise AppError(ErrorKind.UNAUTHENTICATED)

    try:
        claims = decode_access_token(credentials.credentials)
    except AppError as exc:
        logger.info(f"[Auth] 토큰 검증 실패: {exc.message}")
        raise AppError(ErrorKind.UNAUTHENTICATED, exc.message)

    try:
        user = await repo.find_by_id(claims["userId"])
    except InvalidId:
        # 서명은 유효하지만 id 형식이 잘못된 토큰
        logger.warning(f"[Auth] 토큰의 userId 형식이 잘못되었습니다: {claims['userId']}")
        raise AppError(ErrorKind.UNAUTHENTICATED, "Invalid token. Please log in again.")
    if not user:
        raise AppError(ErrorKind.UNAUTHENTICATED, "The user belonging to this token does no longer exist")

    request.state.user_data = {"userId": str(user.id)}
    return user
