# 지오코딩 서비스 레이어
# - Mapbox 지오코딩 API로 주소 문자열을 위도/경도로 변환
# - 재시도 없음: 한 번 실패하면 바로 GEOCODING_FAILED

from __future__ import annotations

import logging
from urllib.parse import quote

import requests
from fastapi import Request
from starlette.concurrency import run_in_threadpool

from ..core.config import Settings
from ..core.exceptions import AppError, ErrorKind
from ..models.place import Location

logger = logging.getLogger(__name__)


class GeocodingClient:
    def __init__(self, api_key: str, base_url: str = "https://api.mapbox.com", timeout: float = 10.0):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, config: Settings) -> "GeocodingClient":
        return cls(config.MAPBOX_API_KEY, config.GEOCODING_API_BASE, config.GEOCODING_TIMEOUT_SECONDS)

    async def resolve(self, address: str) -> Location:
        # requests는 동기 라이브러리이므로 스레드 풀에서 실행해 이벤트 루프를 막지 않습니다
        return await run_in_threadpool(self._lookup, address)

    def _lookup(self, address: str) -> Location:
        """
        주소를 좌표로 변환합니다.

        Mapbox 응답의 features[0].center는 [경도, 위도] 순서입니다.

        Args:
            address: 자유 형식 주소 (예: "1 Main St")

        Returns:
            Location: 위도(lat)/경도(lng)

        Raises:
            AppError(GEOCODING_FAILED): 네트워크/HTTP 오류, 응답 파싱 실패, 결과 0건
        """
        url = f"{self.base_url}/geocoding/v5/mapbox.places/{quote(address, safe='')}.json"
        logger.info(f"[Mapbox] Geocoding address: {address!r}")

        # 예외 문자열에는 access_token이 포함된 URL이 들어가므로 메시지/로그에 쓰지 않음
        try:
            resp = requests.get(url, params={"access_token": self.api_key}, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            logger.error(f"[Mapbox] HTTP {status} for {address!r}")
            raise AppError(
                ErrorKind.GEOCODING_FAILED,
                f"Could not get coordinates for address: {address}",
                address=address,
                cause=e,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"[Mapbox] Request failed for {address!r}: {type(e).__name__}")
            raise AppError(
                ErrorKind.GEOCODING_FAILED,
                f"Could not get coordinates for address: {address}",
                address=address,
                cause=e,
            )
        except ValueError as e:
            logger.error(f"[Mapbox] Invalid JSON response for {address!r}: {e}")
            raise AppError(
                ErrorKind.GEOCODING_FAILED,
                f"Could not get coordinates for address: {address}. Error: {e}",
                address=address,
                cause=e,
            )

        features = data.get("features") if isinstance(data, dict) else None
        if not features:
            logger.warning(f"[Mapbox] No match for address {address!r}")
            raise AppError(
                ErrorKind.GEOCODING_FAILED,
                f"Could not find coordinates for address: {address}",
                address=address,
                cause=None,
            )

        try:
            lng, lat = features[0]["center"]
            location = Location(lat=lat, lng=lng)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"[Mapbox] Unexpected feature format for {address!r}: {e}")
            raise AppError(
                ErrorKind.GEOCODING_FAILED,
                f"Could not get coordinates for address: {address}. Error: {e}",
                address=address,
                cause=e,
            )

        logger.info(f"[Mapbox] Resolved {address!r} -> ({location.lat}, {location.lng})")
        return location


def get_geocoding_client(request: Request) -> GeocodingClient:
    return GeocodingClient.from_settings(request.app.state.settings)
