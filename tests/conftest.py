import os
import tempfile

# main 모듈 import 전에 설정 (로그 파일을 작업 폴더에 만들지 않도록)
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "jejumap-test.log"))

import pytest
from fastapi.testclient import TestClient

from jejumap.repository.db import dispose_engine, init_engine, init_tables, new_session


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'jejumap-test.db'}"


@pytest.fixture
def client(database_url):
    from main import app

    init_engine(database_url)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
async def session(database_url):
    init_engine(database_url)
    await init_tables()
    async with new_session() as db_session:
        yield db_session
    await dispose_engine()
