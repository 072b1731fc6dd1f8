"""
테스트 공통 픽스처

앱 모듈을 임포트하기 전에 환경 변수를 설정해야 합니다.
(Settings는 임포트 시점의 환경 변수로 기본값을 정합니다.)
"""
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["API_KEY"] = "test-api-key"
os.environ["ENV"] = "test"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="gateway-editor-test-")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.database import Base, get_db
from app.main import app as fastapi_app
from app.schemas import GatewayConfigCreate, EndpointCreate
from app.services import GatewayConfigService, EndpointService


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
async def pet_store(db):
    """Pet Store 설정 (엔드포인트 없음)"""
    return await GatewayConfigService.create(
        db, GatewayConfigCreate(name="Pet Store", version="1.0.0")
    )


@pytest.fixture
def make_endpoint(db):
    async def _make(config_id: str, method: str, path: str, **fields):
        return await EndpointService.create(
            db, config_id, EndpointCreate(method=method, path=path, **fields)
        )
    return _make
