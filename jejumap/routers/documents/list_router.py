import logging

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from jejumap.dtos.common.response import ErrorResponse, SuccessResponse
from jejumap.dtos.travel_models import ListDocument
from jejumap.repository.db import get_async_session
from jejumap.services.documents.document_service import find_document, replace_document

logger = logging.getLogger(__name__)

router = APIRouter()


# 여행지/카페/일차별 장소 목록 조회
@router.get("")
async def read_list(session: AsyncSession = Depends(get_async_session)):
    try:
        document = await find_document("list", session)
        return SuccessResponse(data=document)
    except Exception as e:
        logger.error(f"[ list_router ] 목록 조회 실패 : {e}")
        return ErrorResponse(message="장소 목록 조회에 실패했습니다.", error_detail=e)


# 목록 전체 교체
@router.post("")
async def create_list(list_document: ListDocument, session: AsyncSession = Depends(get_async_session)):
    try:
        inserted_id = await replace_document("list", list_document.to_document(), session)
        return SuccessResponse(data={"insertedId": inserted_id})
    except Exception as e:
        logger.error(f"[ list_router ] 목록 저장 실패 : {e}")
        return ErrorResponse(message="장소 목록 저장에 실패했습니다.", error_detail=e)
