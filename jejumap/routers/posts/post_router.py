import logging

from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from jejumap.dtos.common.response import ErrorResponse, SuccessResponse
from jejumap.dtos.travel_models import PostRequest
from jejumap.repository.db import get_async_session
from jejumap.services.posts.post_service import find_posts, reg_post

logger = logging.getLogger(__name__)

router = APIRouter()


# 게시글 저장
@router.post("")
async def create_post(post: PostRequest, session: AsyncSession = Depends(get_async_session)):
    # 필수값 검증
    missing = post.missing_fields()
    if missing:
        logger.warning(f"[ post_router ] 필수값 누락 : {missing}")
        return ErrorResponse(message="모든 필드가 필요합니다.", status_code=400)
    try:
        post_id = await reg_post(post, session)
        return SuccessResponse(data={"id": post_id}, message="성공적으로 저장되었습니다.", status_code=201)
    except Exception as e:
        logger.error(f"[ post_router ] 게시글 저장 실패 : {e}")
        return ErrorResponse(message="서버 오류 발생", error_detail=e)


# 게시글 목록 조회 (날짜 내림차순)
@router.get("")
async def read_posts(session: AsyncSession = Depends(get_async_session)):
    try:
        posts = await find_posts(session)
        return SuccessResponse(data={"posts": posts})
    except Exception as e:
        logger.error(f"[ post_router ] 게시글 조회 실패 : {e}")
        return ErrorResponse(message="게시글 조회 중 오류 발생", error_detail=e)
