from sqlmodel.ext.asyncio.session import AsyncSession

from jejumap.data_models.data_model import Post
from jejumap.dtos.travel_models import PostRequest
from jejumap.repository.posts.post_repository import get_posts, save_post


async def reg_post(post: PostRequest, session: AsyncSession) -> str:
    post_id = await save_post(Post(**post.model_dump()), session)
    await session.commit()
    return post_id


async def find_posts(session: AsyncSession) -> list[dict]:
    posts = await get_posts(session)
    return [post.to_response() for post in posts]
