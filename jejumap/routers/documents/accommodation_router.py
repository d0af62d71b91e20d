import logging

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from jejumap.dtos.common.response import ErrorResponse, SuccessResponse
from jejumap.dtos.travel_models import AccommodationDocument
from jejumap.repository.db import get_async_session
from jejumap.services.documents.document_service import find_document, replace_document

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def read_accommodations(session: AsyncSession = Depends(get_async_session)):
    try:
        document = await find_document("accommodations", session)
        return SuccessResponse(data=document)
    except Exception as e:
        logger.error(f"[ accommodation_router ] 숙소 조회 실패 : {e}")
        return ErrorResponse(message="숙소 정보 조회에 실패했습니다.", error_detail=e)


# 기존 문서 전체 삭제 후 새 데이터 1건 삽입
@router.post("")
async def create_accommodations(accommodations: AccommodationDocument, session: AsyncSession = Depends(get_async_session)):
    try:
        inserted_id = await replace_document("accommodations", accommodations.to_document(), session)
        return SuccessResponse(data={"insertedId": inserted_id})
    except Exception as e:
        logger.error(f"[ accommodation_router ] 숙소 저장 실패 : {e}")
        return ErrorResponse(message="숙소 정보 저장에 실패했습니다.", error_detail=e)
