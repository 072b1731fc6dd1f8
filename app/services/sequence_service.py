"""
엔드포인트 순서 서비스

설정 내 엔드포인트의 상대 순서를 10 단위 간격의 정수 키(SEQ_ORD)로 관리합니다.
간격을 두므로 새 엔드포인트 추가 시 기존 행을 다시 번호 매길 필요가 없습니다.
"""
from sqlalchemy import select, and_, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidReferenceError
from app.core.logging import get_logger
from app.models.gateway_endpoint import GatewayEndpoint

logger = get_logger("sequence")

SEQUENCE_STEP = 10


class SequenceService:
    """엔드포인트 순서 서비스"""

    @staticmethod
    async def next_sequence_value(db: AsyncSession, config_id: str) -> int:
        """
        다음 순서 값 계산

        삭제되지 않은 엔드포인트의 최대 SEQ_ORD + 10 (엔드포인트가 없으면 10)
        """
        result = await db.execute(
            select(func.max(GatewayEndpoint.SEQ_ORD)).where(
                and_(
                    GatewayEndpoint.CFG_ID == config_id,
                    GatewayEndpoint.DEL_YN == 'N',
                )
            )
        )
        max_order = result.scalar()
        return (max_order or 0) + SEQUENCE_STEP

    @staticmethod
    async def reorder(db: AsyncSession, config_id: str, ordered_ids: list[str]) -> None:
        """
        엔드포인트 순서 재지정

        ordered_ids의 위치(1부터)에 따라 SEQ_ORD = 위치 * 10 으로 설정합니다.
        목록에 없는 엔드포인트는 그대로 둡니다 (부분 재정렬 허용).

        ⚠️ 모든 ID를 먼저 검증한 뒤에 변경합니다.
        하나라도 유효하지 않으면 아무것도 변경하지 않습니다.

        Raises:
            InvalidReferenceError: 설정에 속하지 않거나 삭제된 엔드포인트 ID가 포함된 경우
        """
        result = await db.execute(
            select(GatewayEndpoint).where(
                and_(
                    GatewayEndpoint.CFG_ID == config_id,
                    GatewayEndpoint.DEL_YN == 'N',
                )
            )
        )
        endpoints = {endpoint.ENDPT_ID: endpoint for endpoint in result.scalars()}

        invalid_ids = [endpoint_id for endpoint_id in ordered_ids if endpoint_id not in endpoints]
        if invalid_ids:
            raise InvalidReferenceError("엔드포인트", invalid_ids)

        for position, endpoint_id in enumerate(ordered_ids, start=1):
            endpoints[endpoint_id].SEQ_ORD = position * SEQUENCE_STEP

        await db.flush()
        logger.info(
            f"엔드포인트 순서 변경: {len(ordered_ids)}건",
            extra={"extra_data": {"config_id": config_id, "endpoint_ids": ordered_ids}},
        )
