"""
데이터베이스 연결 및 세션 관리
비동기 SQLAlchemy를 사용한 MySQL 연결
"""
import logging
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from app.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def _engine_options() -> dict:
    """엔진 옵션 (SQLite는 커넥션 풀 크기 지정 불가)"""
    options = {"echo": settings.debug}
    if not settings.is_sqlite:
        options.update(
            pool_pre_ping=True,
            pool_size=settings.mysql_pool_size,
            max_overflow=20,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options())

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)

# Base 클래스
Base = declarative_base()


def utcnow() -> datetime:
    """현재 UTC 시각 (DB 저장용 naive datetime)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


async def get_db() -> AsyncSession:
    """의존성 주입용 DB 세션 제공"""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db():
    """데이터베이스 테이블 초기화"""
    # 모델 등록 (metadata에 테이블 추가)
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("데이터베이스 테이블 초기화 완료")
