import logging

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from jejumap.data_models.data_model import Post

logger = logging.getLogger(__name__)


async def save_post(post: Post, session: AsyncSession) -> str:
    try:
        session.add(post)
        await session.flush()
        logger.info(f"[ post_repository ] 게시글 저장 완료 : {post.id}")
        return post.id
    except Exception as e:
        logger.error(f"[ post_repository ] save_post() 에러 : {e}")
        raise e


# 날짜 내림차순 전체 조회
async def get_posts(session: AsyncSession) -> list[Post]:
    try:
        query = select(Post).order_by(Post.date.desc())
        result = await session.exec(query)
        return list(result.all())
    except Exception as e:
        logger.error(f"[ post_repository ] get_posts() 에러 : {e}")
        raise e
