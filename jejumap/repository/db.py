from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from jejumap.config import settings
# 테이블 메타데이터 등록
from jejumap.data_models import data_model  # noqa: F401

logger = logging.getLogger(__name__)

# 프로세스 전역에서 재사용하는 엔진 (처음 사용할 때 생성)
_engine: AsyncEngine | None = None
_session_maker: async_sessionmaker | None = None


def init_engine(database_url: str) -> AsyncEngine:
    global _engine, _session_maker
    _engine = create_async_engine(database_url, echo=settings.SQL_ECHO)
    _session_maker = async_sessionmaker(
        _engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    logger.info("[ db ] 데이터베이스 엔진 생성")
    return _engine


def get_engine() -> AsyncEngine:
    if _engine is None:
        if not settings.DATABASE_URL:
            raise ValueError("DATABASE_URL 환경 변수가 설정되지 않았습니다.")
        init_engine(settings.DATABASE_URL)
    return _engine


async def init_tables() -> None:
    async with get_engine().begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)


async def dispose_engine() -> None:
    global _engine, _session_maker
    if _engine is not None:
        await _engine.dispose()
        logger.info("[ db ] 데이터베이스 연결 종료")
    _engine = None
    _session_maker = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting application...")
    app.state.engine = get_engine()
    await init_tables()
    try:
        yield
    finally:
        logger.info("Shutting down application...")
        await dispose_engine()


def new_session() -> AsyncSession:
    get_engine()
    return _session_maker()


# 의존성 주입을 위한 비동기 세션 제공자
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with new_session() as session:
        try:
            logger.debug(f"💡[ 세션 생성 ] {session}")
            yield session
            await session.commit()
        except Exception as e:
            await session.rollback()
            logger.error(f"Database error: {str(e)}")
            raise
        finally:
            logger.debug(f"💡[ 세션 종료 ] {session}")
