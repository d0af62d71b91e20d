import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel

from jejumap.config import settings
from jejumap.dtos.travel_models import AccommodationDocument, ListDocument, ScheduleDocument

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)


class TravelApiClient:
    """저장된 여행지 목록 / 일정표 / 숙소 문서를 내부 HTTP API로 가져옵니다."""

    def __init__(self, base_url: str | None = None, transport: httpx.AsyncBaseTransport | None = None, timeout: float = 10):
        self.base_url = base_url or settings.API_BASE_URL
        self.transport = transport
        self.timeout = timeout

    async def _get_document(self, path: str, model: type[DocumentT]) -> DocumentT | None:
        async with httpx.AsyncClient(base_url=self.base_url, transport=self.transport, timeout=self.timeout) as client:
            response = await client.get(path)
            response.raise_for_status()
            data = response.json()
        logger.debug(f"[ api_client ] GET {path} : {data}")
        return model.model_validate(data) if data is not None else None

    async def fetch_list_data(self) -> ListDocument | None:
        return await self._get_document("/api/list", ListDocument)

    async def fetch_schedule_data(self) -> ScheduleDocument | None:
        return await self._get_document("/api/schedule", ScheduleDocument)

    async def fetch_accommodation_data(self) -> AccommodationDocument | None:
        return await self._get_document("/api/accommodations", AccommodationDocument)
