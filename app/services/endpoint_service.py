"""
게이트웨이 엔드포인트 서비스
설정에 속한 엔드포인트의 CRUD 및 순서 변경을 처리합니다.
"""
from typing import Any, Optional
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import utcnow
from app.core.exceptions import NotFoundError, DuplicateError
from app.core.logging import get_logger
from app.models.gateway_endpoint import GatewayEndpoint, ENDPOINT_FIELD_COLUMNS
from app.schemas.endpoint import EndpointCreate, EndpointUpdate
from app.services.gateway_config_service import GatewayConfigService
from app.services.identity_service import generate_id
from app.services.sequence_service import SequenceService

logger = get_logger("endpoint")


def apply_endpoint_fields(endpoint: GatewayEndpoint, fields: dict[str, Any]) -> None:
    """스키마 필드명 기준 값을 컬럼에 반영"""
    for field, value in fields.items():
        column = ENDPOINT_FIELD_COLUMNS.get(field)
        if column:
            setattr(endpoint, column, value)


class EndpointService:
    """게이트웨이 엔드포인트 서비스"""

    @staticmethod
    async def list_endpoints(db: AsyncSession, config_id: str) -> list[GatewayEndpoint]:
        """설정의 엔드포인트 목록 조회 (SEQ_ORD 오름차순)"""
        await GatewayConfigService.get_or_404(db, config_id)

        result = await db.execute(
            select(GatewayEndpoint)
            .where(
                and_(
                    GatewayEndpoint.CFG_ID == config_id,
                    GatewayEndpoint.DEL_YN == 'N',
                )
            )
            .order_by(GatewayEndpoint.SEQ_ORD.asc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_by_id(
        db: AsyncSession,
        config_id: str,
        endpoint_id: str,
    ) -> GatewayEndpoint:
        """설정 내 엔드포인트 조회 (없거나 삭제된 경우 NotFoundError)"""
        result = await db.execute(
            select(GatewayEndpoint).where(
                and_(
                    GatewayEndpoint.ENDPT_ID == endpoint_id,
                    GatewayEndpoint.CFG_ID == config_id,
                    GatewayEndpoint.DEL_YN == 'N',
                )
            )
        )
        endpoint = result.scalar_one_or_none()
        if not endpoint:
            raise NotFoundError("엔드포인트", endpoint_id)
        return endpoint

    @staticmethod
    async def find_duplicate(
        db: AsyncSession,
        config_id: str,
        method: str,
        path: str,
        exclude_id: Optional[str] = None,
    ) -> Optional[GatewayEndpoint]:
        """같은 설정 내 (메서드, 경로)가 같은 삭제되지 않은 엔드포인트 조회"""
        query = select(GatewayEndpoint).where(
            and_(
                GatewayEndpoint.CFG_ID == config_id,
                GatewayEndpoint.HTTP_MTHD == method.upper(),
                GatewayEndpoint.API_PATH == path,
                GatewayEndpoint.DEL_YN == 'N',
            )
        )
        if exclude_id:
            query = query.where(GatewayEndpoint.ENDPT_ID != exclude_id)
        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    @staticmethod
    async def create(
        db: AsyncSession,
        config_id: str,
        data: EndpointCreate,
    ) -> GatewayEndpoint:
        """새 엔드포인트 생성 (순서 값은 현재 최대값 + 10)"""
        await GatewayConfigService.get_or_404(db, config_id)

        # 중복 검사
        existing = await EndpointService.find_duplicate(db, config_id, data.method, data.path)
        if existing:
            raise DuplicateError("엔드포인트", "method+path", f"{data.method} {data.path}")

        sequence_order = await SequenceService.next_sequence_value(db, config_id)

        endpoint = GatewayEndpoint(
            ENDPT_ID=generate_id(),
            CFG_ID=config_id,
            SEQ_ORD=sequence_order,
            DEL_YN='N',
        )
        apply_endpoint_fields(endpoint, data.model_dump(exclude_unset=True))
        endpoint.HTTP_MTHD = data.method.upper()
        endpoint.API_PATH = data.path
        db.add(endpoint)
        await db.flush()

        logger.info(
            f"엔드포인트 생성: {endpoint.HTTP_MTHD} {endpoint.API_PATH} (seq={sequence_order})",
            extra={"extra_data": {"config_id": config_id, "endpoint_id": endpoint.ENDPT_ID}},
        )
        return endpoint

    @staticmethod
    async def update(
        db: AsyncSession,
        config_id: str,
        endpoint_id: str,
        data: EndpointUpdate,
    ) -> GatewayEndpoint:
        """
        엔드포인트 부분 업데이트

        메서드나 경로가 바뀌면 자기 자신을 제외한 엔드포인트와의 중복을 다시 검사합니다.
        """
        endpoint = await EndpointService.get_by_id(db, config_id, endpoint_id)

        update_data = data.model_dump(exclude_unset=True)
        # 메서드/경로는 NULL로 변경 불가
        for field in ("method", "path"):
            if field in update_data and update_data[field] is None:
                del update_data[field]

        if "method" in update_data or "path" in update_data:
            method = update_data.get("method", endpoint.HTTP_MTHD).upper()
            path = update_data.get("path", endpoint.API_PATH)
            duplicate = await EndpointService.find_duplicate(
                db, config_id, method, path, exclude_id=endpoint_id
            )
            if duplicate:
                raise DuplicateError("엔드포인트", "method+path", f"{method} {path}")
            update_data["method"] = method

        apply_endpoint_fields(endpoint, update_data)
        endpoint.UPDT_DT = utcnow()
        await db.flush()
        return endpoint

    @staticmethod
    async def remove(db: AsyncSession, config_id: str, endpoint_id: str) -> None:
        """엔드포인트 소프트 삭제"""
        endpoint = await EndpointService.get_by_id(db, config_id, endpoint_id)

        endpoint.DEL_YN = 'Y'
        endpoint.DEL_DT = utcnow()
        endpoint.UPDT_DT = utcnow()
        await db.flush()

        logger.info(
            f"엔드포인트 삭제: {endpoint.HTTP_MTHD} {endpoint.API_PATH}",
            extra={"extra_data": {"config_id": config_id, "endpoint_id": endpoint_id}},
        )

    @staticmethod
    async def reorder(db: AsyncSession, config_id: str, endpoint_ids: list[str]) -> None:
        """엔드포인트 순서 변경"""
        await GatewayConfigService.get_or_404(db, config_id)
        await SequenceService.reorder(db, config_id, endpoint_ids)
