import logging
from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from jejumap.repository.documents.document_repository import find_all, find_one, replace_all, upsert_one

logger = logging.getLogger(__name__)

# 리소스 이름 -> 저장소 컬렉션 이름
COLLECTIONS = {
    "list": "travelData",
    "schedule": "schedules",
    "accommodations": "accommodations",
    "places": "places",
}


def _strip_id(body: dict[str, Any]) -> dict[str, Any]:
    # _id 는 저장소가 관리
    return {key: value for key, value in body.items() if key != "_id"}


async def find_document(resource: str, session: AsyncSession) -> dict[str, Any] | None:
    document = await find_one(COLLECTIONS[resource], session)
    return document.to_response() if document is not None else None


async def find_documents(resource: str, session: AsyncSession) -> list[dict[str, Any]]:
    documents = await find_all(COLLECTIONS[resource], session)
    return [document.to_response() for document in documents]


async def replace_document(resource: str, body: dict[str, Any], session: AsyncSession) -> str:
    inserted_id = await replace_all(COLLECTIONS[resource], _strip_id(body), session)
    await session.commit()
    logger.info(f"[ document_service ] {resource} 문서 교체 완료 : {inserted_id}")
    return inserted_id


async def update_document(resource: str, body: dict[str, Any], session: AsyncSession) -> dict[str, Any]:
    result = await upsert_one(COLLECTIONS[resource], _strip_id(body), session)
    await session.commit()
    logger.info(f"[ document_service ] {resource} 문서 갱신 완료 : {result}")
    return result
