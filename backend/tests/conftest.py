# 공용 테스트 픽스처 (MongoDB/외부 API 의존성 없음)
# - 인메모리 저장소 + 스냅샷 기반 가짜 트랜잭션
# - 고정 좌표를 돌려주는 가짜 지오코더
# - dependency_overrides로 교체한 FastAPI TestClient

import copy
import os
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

# 앱 모듈 import 전에 필수 환경 변수 설정
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-not-real")
os.environ.setdefault("MAPBOX_API_KEY", "test-mapbox-key")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENV"] = "test"

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from placeshare.core.config import settings
from placeshare.core.database import get_transaction
from placeshare.core.exceptions import AppError, ErrorKind
from placeshare.main import create_app
from placeshare.models.place import Location
from placeshare.repositories.place_repository import PlaceRepository
from placeshare.repositories.user_repository import UserRepository
from placeshare.services.geocoding_service import get_geocoding_client


def _matches(record: Any, filters: Optional[Dict[str, Any]]) -> bool:
    return all(getattr(record, key) == value for key, value in (filters or {}).items())


class InMemoryStore:
    def __init__(self):
        self.users: Dict[ObjectId, SimpleNamespace] = {}
        self.places: Dict[ObjectId, SimpleNamespace] = {}
        self.commits = 0
        self.rollbacks = 0

    @asynccontextmanager
    async def transaction(self):
        # 예외 발생 시 트랜잭션 시작 시점 상태로 되돌림
        snapshot = (copy.deepcopy(self.users), copy.deepcopy(self.places))
        try:
            yield None
        except BaseException:
            self.users, self.places = snapshot
            self.rollbacks += 1
            raise
        self.commits += 1


class InMemoryUserRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def find_by_id(self, user_id):
        return self.store.users.get(ObjectId(str(user_id)))

    async def find_one(self, filters):
        return next((u for u in self.store.users.values() if _matches(u, filters)), None)

    async def find(self, filters=None) -> List[SimpleNamespace]:
        return [u for u in self.store.users.values() if _matches(u, filters)]

    async def create(self, **fields):
        user = SimpleNamespace(id=ObjectId(), **fields)
        self.store.users[user.id] = user
        return user

    async def push_place(self, user_id, place_id, session=None) -> bool:
        user = self.store.users.get(user_id)
        if user is None:
            return False
        user.places.append(place_id)
        return True

    async def pull_place(self, user_id, place_id, session=None) -> bool:
        user = self.store.users.get(user_id)
        if user is None:
            return False
        user.places = [pid for pid in user.places if pid != place_id]
        return True

    async def delete_by_id(self, user_id) -> bool:
        return self.store.users.pop(ObjectId(str(user_id)), None) is not None


class InMemoryPlaceRepository:
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def find_by_id(self, place_id):
        return self.store.places.get(ObjectId(str(place_id)))

    async def find_one(self, filters):
        return next((p for p in self.store.places.values() if _matches(p, filters)), None)

    async def find(self, filters=None):
        return [p for p in self.store.places.values() if _matches(p, filters)]

    async def create(self, session=None, **fields):
        place = SimpleNamespace(id=ObjectId(), **fields)
        self.store.places[place.id] = place
        return place

    async def update_one(self, place, changes):
        for field, value in changes.items():
            setattr(place, field, value)
        return place

    async def delete_by_id(self, place_id, session=None) -> bool:
        return self.store.places.pop(place_id, None) is not None


class StubGeocoder:
    """주소 -> 좌표 고정 응답. failing 목록의 주소는 GEOCODING_FAILED"""

    def __init__(self, location: Location = Location(lat=1, lng=2)):
        self.location = location
        self.failing = {"⌀⌀⌀invalid⌀⌀⌀"}
        self.calls: List[str] = []

    async def resolve(self, address: str) -> Location:
        self.calls.append(address)
        if address in self.failing:
            raise AppError(
                ErrorKind.GEOCODING_FAILED,
                f"Could not find coordinates for address: {address}",
                address=address,
                cause=None,
            )
        return self.location


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def user_repo(store):
    return InMemoryUserRepository(store)


@pytest.fixture
def place_repo(store):
    return InMemoryPlaceRepository(store)


@pytest.fixture
def geocoder():
    return StubGeocoder()


@pytest.fixture
def app(store, user_repo, place_repo, geocoder):
    application = create_app(settings)
    application.dependency_overrides[UserRepository] = lambda: user_repo
    application.dependency_overrides[PlaceRepository] = lambda: place_repo
    application.dependency_overrides[get_geocoding_client] = lambda: geocoder
    application.dependency_overrides[get_transaction] = lambda: store.transaction
    return application


@pytest.fixture
def client(app):
    # with 블록 없이 사용: lifespan(MongoDB 연결)을 실행하지 않음
    return TestClient(app)


def sign_up(client, name="Alice", email="alice@example.com", password="secret123"):
    resp = client.post("/api/v1/users/signup", json={"name": name, "email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return resp.json()


def auth_header(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
