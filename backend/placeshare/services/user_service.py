# 사용자 서비스 레이어
# - 이메일 중복 체크, 회원가입 (비밀번호 해싱은 저장 전에 명시적으로 수행)
# - 로그인 (비밀번호 검증, JWT 토큰 발급)
# - 사용자 목록 조회

import logging
from typing import List, Tuple

from fastapi import Depends, Request

from ..core.config import Settings
from ..core.exceptions import AppError, ErrorKind
from ..core.security import create_access_token, get_password_hash, verify_password
from ..models.user import User
from ..repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class UserService:
    def __init__(self, repo: UserRepository, config: Settings):
        self.repo = repo
        self.config = config

    async def list_users(self) -> List[User]:
        return await self.repo.find()

    async def sign_up(self, name: str, email: str, password: str) -> Tuple[User, str]:
        email = email.strip().lower()
        existing = await self.repo.find_one({"email": email})
        if existing:
            raise AppError(ErrorKind.DUPLICATE_EMAIL)

        name = (name or "").strip()
        if not name:
            raise AppError(ErrorKind.VALIDATION_FAILED, "Need to provide a name", field="name")
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise AppError(
                ErrorKind.VALIDATION_FAILED,
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
                field="password",
            )

        hashed = get_password_hash(password)
        user = await self.repo.create(
            name=name,
            email=email,
            password_hash=hashed,
            image=self.config.DEFAULT_USER_IMAGE,
            places=[],
        )
        logger.info(f"[UserService] 회원가입 완료: {user.id}")
        return user, create_access_token(str(user.id), user.email)

    async def log_in(self, email: str, password: str) -> Tuple[User, str]:
        if not email or not password:
            raise AppError(ErrorKind.MISSING_CREDENTIALS)

        user = await self.repo.find_one({"email": email.strip().lower()})
        # 이메일이 없는 경우와 비밀번호가 틀린 경우를 구분하지 않음
        if not user or not verify_password(password, user.password_hash):
            raise AppError(ErrorKind.INVALID_CREDENTIALS)
        return user, create_access_token(str(user.id), user.email)


def get_user_service(request: Request, repo: UserRepository = Depends(UserRepository)) -> UserService:
    return UserService(repo, request.app.state.settings)
