"""
게이트웨이 설정 서비스
게이트웨이 설정의 CRUD 및 활성화 작업을 처리합니다.
"""
from typing import Any, Optional
from sqlalchemy import select, update, and_, case, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.database import utcnow
from app.core.exceptions import NotFoundError, DuplicateError
from app.core.logging import get_logger
from app.models.gateway_config import GatewayConfig, CONFIG_FIELD_COLUMNS, DEFAULT_OPENAPI_VERSION
from app.models.gateway_endpoint import GatewayEndpoint
from app.schemas.gateway_config import GatewayConfigCreate, GatewayConfigUpdate
from app.services.identity_service import generate_id, hash_object

logger = get_logger("gateway_config")

# 해시 대상 필드 (생성/수정 공통)
HASHED_FIELDS = ("name", "version", "description", "openapi_version", "metadata")

# 변경 시 해시를 다시 계산하는 필드
HASH_TRIGGER_FIELDS = ("name", "version", "description")

# NULL로 변경할 수 없는 필드
REQUIRED_FIELDS = ("name", "version", "openapi_version")


class GatewayConfigService:
    """게이트웨이 설정 서비스"""

    @staticmethod
    def hashable_projection(config: GatewayConfig) -> dict[str, Any]:
        """해시 계산용 설정 투영 (생성 DTO와 같은 모양)"""
        return {
            "name": config.CFG_NAME,
            "version": config.CFG_VER,
            "description": config.CFG_DESC,
            "openapi_version": config.OAS_VER or DEFAULT_OPENAPI_VERSION,
            "metadata": config.META_DATA,
        }

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        config_id: str,
        include_deleted: bool = False,
    ) -> Optional[GatewayConfig]:
        """ID로 설정 조회"""
        query = select(GatewayConfig).where(GatewayConfig.CFG_ID == config_id)
        if not include_deleted:
            query = query.where(GatewayConfig.DEL_YN == 'N')
        result = await db.execute(query)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_or_404(db: AsyncSession, config_id: str) -> GatewayConfig:
        """ID로 설정 조회 (없거나 삭제된 경우 NotFoundError)"""
        config = await GatewayConfigService.get_by_id(db, config_id)
        if not config:
            raise NotFoundError("게이트웨이 설정", config_id)
        return config

    @staticmethod
    async def get_by_hash(
        db: AsyncSession,
        file_hash: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[GatewayConfig]:
        """콘텐츠 해시로 삭제되지 않은 설정 조회"""
        query = select(GatewayConfig).where(
            and_(
                GatewayConfig.FILE_HASH == file_hash,
                GatewayConfig.DEL_YN == 'N',
            )
        )
        if exclude_id:
            query = query.where(GatewayConfig.CFG_ID != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_with_endpoints(
        db: AsyncSession,
        config_id: str,
    ) -> tuple[GatewayConfig, list[GatewayEndpoint]]:
        """
        설정과 엔드포인트 조회

        엔드포인트는 조회 후 메모리에서 SEQ_ORD 오름차순으로 정렬합니다.
        삭제된 엔드포인트는 제외합니다.
        """
        result = await db.execute(
            select(GatewayConfig)
            .where(
                and_(
                    GatewayConfig.CFG_ID == config_id,
                    GatewayConfig.DEL_YN == 'N',
                )
            )
            .options(selectinload(GatewayConfig.endpoints))
            .execution_options(populate_existing=True)
        )
        config = result.scalar_one_or_none()
        if not config:
            raise NotFoundError("게이트웨이 설정", config_id)

        endpoints = [e for e in config.endpoints if e.DEL_YN == 'N']
        endpoints.sort(key=lambda e: e.SEQ_ORD)
        return config, endpoints

    @staticmethod
    async def get_active(db: AsyncSession) -> Optional[GatewayConfig]:
        """현재 활성화된 설정 조회"""
        result = await db.execute(
            select(GatewayConfig)
            .where(
                and_(
                    GatewayConfig.ACTV_YN == 'Y',
                    GatewayConfig.DEL_YN == 'N',
                )
            )
            .order_by(GatewayConfig.UPDT_DT.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_configs(
        db: AsyncSession,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[GatewayConfig], int]:
        """설정 목록 조회 (생성일시 내림차순)"""
        query = select(GatewayConfig).where(GatewayConfig.DEL_YN == 'N')
        count_query = select(func.count(GatewayConfig.CFG_ID)).where(GatewayConfig.DEL_YN == 'N')

        # 페이지네이션
        offset = (page - 1) * limit
        query = query.order_by(GatewayConfig.CREA_DT.desc()).offset(offset).limit(limit)

        result = await db.execute(query)
        configs = list(result.scalars().all())

        count_result = await db.execute(count_query)
        total = count_result.scalar() or 0

        return configs, total

    @staticmethod
    async def create(db: AsyncSession, data: GatewayConfigCreate) -> GatewayConfig:
        """
        새 설정 생성

        생성 요청의 해시 투영으로 FILE_HASH를 계산하고,
        같은 해시의 삭제되지 않은 설정이 있으면 DuplicateError를 발생시킵니다.
        """
        payload = data.model_dump()
        file_hash = hash_object({field: payload.get(field) for field in HASHED_FIELDS})

        existing = await GatewayConfigService.get_by_hash(db, file_hash)
        if existing:
            raise DuplicateError("게이트웨이 설정", "file_hash", file_hash)

        config = GatewayConfig(
            CFG_ID=generate_id(),
            CFG_NAME=data.name,
            CFG_VER=data.version,
            CFG_DESC=data.description,
            OAS_VER=data.openapi_version,
            META_DATA=data.metadata,
            FILE_HASH=file_hash,
            ACTV_YN='N',
            DEL_YN='N',
        )
        db.add(config)
        await db.flush()

        logger.info(
            f"게이트웨이 설정 생성: {config.CFG_NAME} v{config.CFG_VER}",
            extra={"extra_data": {"config_id": config.CFG_ID}},
        )
        return config

    @staticmethod
    async def update(
        db: AsyncSession,
        config_id: str,
        data: GatewayConfigUpdate,
    ) -> GatewayConfig:
        """
        설정 부분 업데이트

        name, version, description 중 하나라도 값이 바뀌면
        변경 후 객체의 해시 투영으로 FILE_HASH를 다시 계산합니다.
        """
        config = await GatewayConfigService.get_or_404(db, config_id)

        update_data = data.model_dump(exclude_unset=True)
        hash_changed = False
        for field, value in update_data.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            column = CONFIG_FIELD_COLUMNS[field]
            if field in HASH_TRIGGER_FIELDS and getattr(config, column) != value:
                hash_changed = True
            setattr(config, column, value)

        if hash_changed:
            file_hash = hash_object(GatewayConfigService.hashable_projection(config))
            duplicate = await GatewayConfigService.get_by_hash(db, file_hash, exclude_id=config_id)
            if duplicate:
                raise DuplicateError("게이트웨이 설정", "file_hash", file_hash)
            config.FILE_HASH = file_hash

        config.UPDT_DT = utcnow()
        await db.flush()
        return config

    @staticmethod
    async def activate(db: AsyncSession, config_id: str) -> GatewayConfig:
        """
        설정 활성화

        삭제되지 않은 모든 설정에 대해 단일 조건부 UPDATE로
        대상만 'Y', 나머지는 'N'으로 설정합니다.
        """
        config = await GatewayConfigService.get_or_404(db, config_id)

        await db.execute(
            update(GatewayConfig)
            .where(GatewayConfig.DEL_YN == 'N')
            .values(
                ACTV_YN=case((GatewayConfig.CFG_ID == config_id, 'Y'), else_='N'),
            )
            .execution_options(synchronize_session="fetch")
        )
        await db.refresh(config)

        logger.info(
            f"게이트웨이 설정 활성화: {config.CFG_NAME}",
            extra={"extra_data": {"config_id": config_id}},
        )
        return config

    @staticmethod
    async def deactivate(db: AsyncSession, config_id: str) -> GatewayConfig:
        """설정 비활성화 (대상 설정만)"""
        config = await GatewayConfigService.get_or_404(db, config_id)
        config.ACTV_YN = 'N'
        config.UPDT_DT = utcnow()
        await db.flush()
        return config

    @staticmethod
    async def remove(db: AsyncSession, config_id: str) -> None:
        """
        설정 소프트 삭제

        ⚠️ 실제 데이터는 삭제하지 않고 DEL_YN 플래그만 설정합니다.
        Import 이력 등에서 참조하므로 행은 유지합니다.
        """
        config = await GatewayConfigService.get_or_404(db, config_id)

        config.DEL_YN = 'Y'
        config.ACTV_YN = 'N'
        config.DEL_DT = utcnow()
        config.UPDT_DT = utcnow()
        await db.flush()

        logger.info(
            f"게이트웨이 설정 삭제: {config.CFG_NAME}",
            extra={"extra_data": {"config_id": config_id}},
        )
