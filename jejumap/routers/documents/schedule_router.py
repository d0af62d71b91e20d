import logging

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from jejumap.dtos.common.response import ErrorResponse, SuccessResponse
from jejumap.dtos.travel_models import ScheduleDocument
from jejumap.repository.db import get_async_session
from jejumap.services.documents.document_service import find_document, update_document

logger = logging.getLogger(__name__)

router = APIRouter()


# 일차별 일정표 조회
@router.get("")
async def read_schedule(session: AsyncSession = Depends(get_async_session)):
    try:
        document = await find_document("schedule", session)
        return SuccessResponse(data=document)
    except Exception as e:
        logger.error(f"[ schedule_router ] 일정 조회 실패 : {e}")
        return ErrorResponse(message="일정 조회에 실패했습니다.", error_detail=e)


# 일정표 문서 갱신 (없으면 생성)
@router.post("")
async def update_schedule(schedule: ScheduleDocument, session: AsyncSession = Depends(get_async_session)):
    try:
        result = await update_document("schedule", schedule.to_document(), session)
        return SuccessResponse(data={"result": result}, message="일정이 성공적으로 업데이트되었습니다.")
    except Exception as e:
        logger.error(f"[ schedule_router ] 일정 추가/업데이트 실패 : {e}")
        return ErrorResponse(message="서버 오류", error_detail=e)
