import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from jejumap.dtos.common.response import ErrorResponse, SuccessResponse
from jejumap.repository.db import get_async_session
from jejumap.services.documents.document_service import find_documents, replace_document

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def read_places(session: AsyncSession = Depends(get_async_session)):
    try:
        places = await find_documents("places", session)
        return SuccessResponse(data={"places": places})
    except Exception as e:
        logger.error(f"[ place_router ] 장소 조회 실패 : {e}")
        return ErrorResponse(message="서버 내부 오류", error_detail=e)


@router.post("")
async def create_places(body: dict[str, Any] = Body(...), session: AsyncSession = Depends(get_async_session)):
    try:
        inserted_id = await replace_document("places", body, session)
        return SuccessResponse(data={"insertedId": inserted_id})
    except Exception as e:
        logger.error(f"[ place_router ] 장소 저장 실패 : {e}")
        return ErrorResponse(message="서버 내부 오류", error_detail=e)
