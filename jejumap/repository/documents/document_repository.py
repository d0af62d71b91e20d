import logging
from datetime import datetime
from typing import Any

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from jejumap.data_models.data_model import StoredDocument

logger = logging.getLogger(__name__)


async def find_one(collection: str, session: AsyncSession) -> StoredDocument | None:
    try:
        query = (
            select(StoredDocument)
            .where(StoredDocument.collection == collection)
            .order_by(StoredDocument.created_at)
        )
        result = await session.exec(query)
        return result.first()
    except Exception as e:
        logger.error(f"[ document_repository ] find_one() 에러 : {e}")
        raise e


async def find_all(collection: str, session: AsyncSession) -> list[StoredDocument]:
    try:
        query = (
            select(StoredDocument)
            .where(StoredDocument.collection == collection)
            .order_by(StoredDocument.created_at)
        )
        result = await session.exec(query)
        return list(result.all())
    except Exception as e:
        logger.error(f"[ document_repository ] find_all() 에러 : {e}")
        raise e


async def delete_all(collection: str, session: AsyncSession) -> int:
    try:
        result = await session.execute(delete(StoredDocument).where(StoredDocument.collection == collection))
        logger.info(f"[ document_repository ] {collection} 문서 삭제 : {result.rowcount}건")
        return result.rowcount
    except Exception as e:
        logger.error(f"[ document_repository ] delete_all() 에러 : {e}")
        raise e


async def insert_one(collection: str, body: dict[str, Any], session: AsyncSession) -> str:
    try:
        document = StoredDocument(collection=collection, body=body)
        session.add(document)
        await session.flush()
        logger.info(f"[ document_repository ] {collection} 문서 생성 : {document.id}")
        return document.id
    except Exception as e:
        logger.error(f"[ document_repository ] insert_one() 에러 : {e}")
        raise e


# 기존 문서를 모두 지우고 새 문서 1건 삽입 (트랜잭션 격리 없음)
async def replace_all(collection: str, body: dict[str, Any], session: AsyncSession) -> str:
    await delete_all(collection, session)
    return await insert_one(collection, body, session)


async def upsert_one(collection: str, body: dict[str, Any], session: AsyncSession) -> dict[str, Any]:
    """
    빈 필터로 첫 문서를 찾아 최상위 필드를 덮어씁니다 ($set). 없으면 새로 만듭니다.

    Returns:
        dict: acknowledged / matchedCount / modifiedCount / upsertedId
    """
    try:
        existing = await find_one(collection, session)
        if existing is None:
            upserted_id = await insert_one(collection, body, session)
            return {"acknowledged": True, "matchedCount": 0, "modifiedCount": 0, "upsertedId": upserted_id}

        merged = {**existing.body, **body}
        modified = merged != existing.body
        if modified:
            # JSON 컬럼은 새 객체를 대입해야 변경으로 인식됨
            existing.body = merged
            existing.updated_at = datetime.now()
            session.add(existing)
            await session.flush()
        logger.info(f"[ document_repository ] {collection} 문서 갱신 : {existing.id} (modified={modified})")
        return {"acknowledged": True, "matchedCount": 1, "modifiedCount": int(modified), "upsertedId": None}
    except Exception as e:
        logger.error(f"[ document_repository ] upsert_one() 에러 : {e}")
        raise e
