"""
Export 서비스

설정 문서를 JSON/YAML로 직렬화하고 (설정, 형식)별로 APP_EXPRT_CACHE_H에 캐시합니다.
만료 검사는 조회 시점에만 수행하며, 만료된 항목은 발견 즉시 삭제합니다.
"""
from datetime import timedelta
from typing import Any, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import utcnow
from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.models.export_cache import ExportCache, EXPORT_FORMATS
from app.schemas.transfer import ExportStatusResponse
from app.services.document_assembler import assemble_document, serialize_document
from app.services.gateway_config_service import GatewayConfigService
from app.services.identity_service import generate_id, compute_hash

logger = get_logger("export")


def export_filename(config_id: str, fmt: str) -> str:
    """다운로드 파일명"""
    return f"openapi-{config_id}.{fmt}"


class ExportService:
    """OpenAPI 문서 Export 서비스"""

    @staticmethod
    def _is_expired(entry: ExportCache, now) -> bool:
        """생성 후 TTL이 지났는지 여부 (TTL은 호출 시점의 설정값)"""
        ttl = timedelta(seconds=get_settings().cache_ttl)
        return now - entry.GNRT_DT > ttl

    @staticmethod
    async def _live_entries(db: AsyncSession, config_id: str, fmt: Optional[str] = None) -> list[ExportCache]:
        """
        유효한 캐시 항목 조회 (최신 생성순)

        만료된 항목은 이 시점에 삭제합니다.
        """
        query = select(ExportCache).where(ExportCache.CFG_ID == config_id)
        if fmt:
            query = query.where(ExportCache.FILE_FMT == fmt)
        result = await db.execute(query.order_by(ExportCache.GNRT_DT.desc()))

        now = utcnow()
        live, expired = [], []
        for entry in result.scalars():
            (expired if ExportService._is_expired(entry, now) else live).append(entry)

        if expired:
            for entry in expired:
                await db.delete(entry)
            await db.flush()
            logger.info(
                f"만료된 Export 캐시 삭제: {len(expired)}건",
                extra={"extra_data": {"config_id": config_id, "format": fmt}},
            )
        return live

    @staticmethod
    async def _find_cached(db: AsyncSession, config_id: str, fmt: str):
        """(설정, 형식)의 가장 최근 유효 캐시 항목"""
        entries = await ExportService._live_entries(db, config_id, fmt)
        return entries[0] if entries else None

    @staticmethod
    async def build_document(db: AsyncSession, config_id: str) -> dict[str, Any]:
        """설정 문서 조립 (직렬화 전, 미리보기용)"""
        config, endpoints = await GatewayConfigService.get_with_endpoints(db, config_id)
        return assemble_document(config, endpoints)

    @staticmethod
    async def export_config(db: AsyncSession, config_id: str, fmt: str = "yaml") -> bytes:
        """
        설정 문서 Export

        - 캐시 적중: 접근 횟수 +1, 마지막 접근일시 갱신 후 저장된 바이트 반환
        - 캐시 미스: 문서 조립 → 직렬화 → 캐시 저장 (EXPR_DT = 현재 + TTL)

        Raises:
            ValidationError: 지원하지 않는 형식
            NotFoundError: 설정이 없거나 삭제된 경우
        """
        if fmt not in EXPORT_FORMATS:
            raise ValidationError(
                f"지원하지 않는 Export 형식입니다: {fmt}",
                field="format",
                details={"supported": list(EXPORT_FORMATS)},
            )

        await GatewayConfigService.get_or_404(db, config_id)

        cached = await ExportService._find_cached(db, config_id, fmt)
        if cached:
            cached.ACCS_CNT = (cached.ACCS_CNT or 0) + 1
            cached.LAST_ACCS_DT = utcnow()
            await db.flush()
            logger.debug(
                f"Export 캐시 적중: {config_id} ({fmt})",
                extra={"extra_data": {"cache_id": cached.CACHE_ID, "access_count": cached.ACCS_CNT}},
            )
            return bytes(cached.FILE_CNTNT)

        document = await ExportService.build_document(db, config_id)
        content = serialize_document(document, fmt)

        now = utcnow()
        entry = ExportCache(
            CACHE_ID=generate_id(),
            CFG_ID=config_id,
            FILE_HASH=compute_hash(content.decode("utf-8")),
            FILE_FMT=fmt,
            FILE_CNTNT=content,
            FILE_SIZE=len(content),
            GNRT_DT=now,
            EXPR_DT=now + timedelta(seconds=get_settings().cache_ttl),
            ACCS_CNT=0,
        )
        db.add(entry)
        await db.flush()

        logger.info(
            f"Export 캐시 생성: {config_id} ({fmt}, {len(content)} bytes)",
            extra={"extra_data": {"cache_id": entry.CACHE_ID}},
        )
        return content

    @staticmethod
    async def get_export_status(db: AsyncSession, config_id: str) -> ExportStatusResponse:
        """설정의 유효한 캐시 형식 목록 (만료 항목은 제외 및 삭제)"""
        await GatewayConfigService.get_or_404(db, config_id)

        entries = await ExportService._live_entries(db, config_id)
        cached_formats = {entry.FILE_FMT for entry in entries}
        formats = [fmt for fmt in EXPORT_FORMATS if fmt in cached_formats]
        return ExportStatusResponse(cached=bool(formats), formats=formats)
