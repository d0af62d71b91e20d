import asyncio
import logging

import httpx

from jejumap.config import settings
from jejumap.dtos.travel_models import Location
from jejumap.utils.time_check import time_check

logger = logging.getLogger(__name__)


class KakaoLocalService:
    """
    카카오 로컬 키워드 검색 API로 장소 이름을 좌표/주소 정보로 변환합니다.
    API 문서: https://developers.kakao.com/docs/latest/ko/local/dev-guide#search-by-keyword
    """

    KEYWORD_SEARCH_URL = "https://dapi.kakao.com/v2/local/search/keyword.json"

    def __init__(self, rest_key: str | None = None, transport: httpx.AsyncBaseTransport | None = None, timeout: float = 10):
        self.rest_key = rest_key if rest_key is not None else settings.KAKAO_REST_KEY
        # 테스트에서는 MockTransport 주입
        self.transport = transport
        self.timeout = timeout

    async def search_keyword(self, query: str, client: httpx.AsyncClient) -> list[dict]:
        response = await client.get(
            self.KEYWORD_SEARCH_URL,
            params={"query": query},
            headers={"Authorization": f"KakaoAK {self.rest_key}"},
        )
        response.raise_for_status()  # HTTP 에러 발생 시 예외 처리
        return response.json().get("documents", [])

    @staticmethod
    def to_location(document: dict) -> Location:
        # 카카오 응답: x = 경도, y = 위도
        return Location(
            title=document.get("place_name", ""),
            lat=float(document["y"]),
            lng=float(document["x"]),
            description=document.get("category_name") or "",
            address=document.get("address_name") or "",
            road_address=document.get("road_address_name") or "",
            url=document.get("place_url") or "",
            phone=document.get("phone") or "",
            thumbnail=document.get("thumbnail_url") or "",
        )

    async def _fetch_location(self, place: str, client: httpx.AsyncClient) -> Location | None:
        try:
            documents = await self.search_keyword(place, client)
            if not documents:
                logger.warning(f"❗[ kakao_service ] {place} 검색 결과 없음")
                return None
            return self.to_location(documents[0])
        except Exception as e:
            logger.error(f"[ kakao_service ] {place} 검색 실패 : {e}")
            return None

    @time_check
    async def fetch_locations(self, places: list[str]) -> list[Location]:
        """
        장소 이름 목록을 동시에 검색해 결과가 있는 장소만 반환합니다.
        중복된 이름은 중복 호출되며, 검색 결과가 없거나 실패한 장소는 제외됩니다.
        """
        if not self.rest_key:
            logger.error("[ kakao_service ] 환경변수 KAKAO_REST_KEY가 정의되어 있지 않습니다.")
            return []
        if not places:
            return []

        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            tasks = [self._fetch_location(place, client) for place in places]
            results = await asyncio.gather(*tasks)

        # 유효한 결과만 필터링
        return [location for location in results if location is not None]
