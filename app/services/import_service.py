"""
Import 서비스

업로드된 OpenAPI 파일을 게이트웨이 설정과 엔드포인트로 저장하고
모든 시도를 Import 이력(APP_IMPRT_HIST_H)에 기록합니다.
"""
import os
import time
from typing import Optional
from sqlalchemy import select, and_, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import GatewayEditorError, ValidationError
from app.core.logging import get_logger, log_execution
from app.models.gateway_config import GatewayConfig
from app.models.gateway_endpoint import GatewayEndpoint
from app.models.import_history import ImportHistory, ImportStatus
from app.schemas.transfer import ImportResult
from app.services.document_ingester import load_document, validate_document, decompose_document
from app.services.endpoint_service import apply_endpoint_fields
from app.services.gateway_config_service import GatewayConfigService
from app.services.identity_service import generate_id, hash_object
from app.services.sequence_service import SequenceService, SEQUENCE_STEP

logger = get_logger("import")


class ImportService:
    """OpenAPI 파일 Import 서비스"""

    @staticmethod
    @log_execution
    async def import_file(
        db: AsyncSession,
        file_path: str,
        filename: str,
        mime_type: Optional[str] = None,
        file_size: Optional[int] = None,
        imported_by: Optional[str] = None,
    ) -> ImportResult:
        """
        파일 Import

        처리 순서:
        1. 이력 행을 processing 상태로 생성하고 즉시 커밋
        2. 파일 읽기 → 형식 판별 → 파싱 → OpenAPI 검증
        3. 문서 해시로 기존 설정 재사용, 없으면 새 설정 생성
        4. 엔드포인트 일괄 저장 (SEQ_ORD 10, 20, ...)
        5. 이력을 success로 갱신

        ⚠️ 실패 시 진행 중인 변경을 롤백하고 이력을 failed로 커밋한 뒤
        ValidationError로 다시 발생시킵니다. 임시 파일은 항상 삭제합니다.
        """
        start_time = time.time()

        history_id = generate_id()
        history = ImportHistory(
            HIST_ID=history_id,
            FILE_NAME=filename,
            FILE_SIZE=file_size,
            FILE_TYPE=mime_type,
            IMPRT_STTS=ImportStatus.PROCESSING.value,
            IMPRT_BY=imported_by,
        )
        db.add(history)
        await db.commit()

        try:
            with open(file_path, "rb") as f:
                content = f.read()
            if file_size is None:
                history.FILE_SIZE = len(content)

            document = validate_document(load_document(content, filename, mime_type))
            config_fields, endpoint_fields = decompose_document(document)

            config = await ImportService._resolve_config(db, hash_object(document), config_fields)
            created = await ImportService._store_endpoints(db, config.CFG_ID, endpoint_fields)

            processing_time_ms = int((time.time() - start_time) * 1000)
            history.CFG_ID = config.CFG_ID
            history.IMPRT_STTS = ImportStatus.SUCCESS.value
            history.ENDPT_CNT = len(endpoint_fields)
            history.PRCS_MS = processing_time_ms
            await db.flush()

            logger.info(
                f"Import 완료: {filename} → {config.CFG_NAME} ({len(endpoint_fields)}개 operation, {created}개 저장)",
                extra={
                    "duration_ms": processing_time_ms,
                    "extra_data": {"config_id": config.CFG_ID, "history_id": history_id},
                },
            )
            return ImportResult(
                config_id=config.CFG_ID,
                endpoints_count=len(endpoint_fields),
                processing_time_ms=processing_time_ms,
            )

        except Exception as e:
            message = e.message if isinstance(e, GatewayEditorError) else str(e)
            processing_time_ms = int((time.time() - start_time) * 1000)
            logger.error(
                f"Import 실패: {filename} - {message}",
                extra={"duration_ms": processing_time_ms, "extra_data": {"history_id": history_id}},
            )

            await db.rollback()
            await ImportService._record_failure(db, history, history_id, message, processing_time_ms)
            raise ValidationError(f"Import 실패: {message}", field="file") from e

        finally:
            ImportService._cleanup(file_path)

    @staticmethod
    async def _resolve_config(db: AsyncSession, file_hash: str, config_fields: dict) -> GatewayConfig:
        """같은 문서 해시의 설정이 있으면 재사용, 없으면 생성"""
        existing = await GatewayConfigService.get_by_hash(db, file_hash)
        if existing:
            logger.info(
                f"동일 문서의 기존 설정 재사용: {existing.CFG_NAME}",
                extra={"extra_data": {"config_id": existing.CFG_ID}},
            )
            return existing

        config = GatewayConfig(
            CFG_ID=generate_id(),
            CFG_NAME=config_fields["name"],
            CFG_VER=config_fields["version"],
            CFG_DESC=config_fields["description"],
            OAS_VER=config_fields["openapi_version"],
            META_DATA=config_fields["metadata"],
            FILE_HASH=file_hash,
            ACTV_YN='N',
            DEL_YN='N',
        )
        db.add(config)
        await db.flush()
        return config

    @staticmethod
    async def _store_endpoints(db: AsyncSession, config_id: str, endpoint_fields: list[dict]) -> int:
        """
        엔드포인트 일괄 저장

        기존 설정을 재사용한 경우 이미 있는 (메서드, 경로)는 건너뛰고
        나머지를 현재 최대 순서 값 뒤에 추가합니다.
        """
        result = await db.execute(
            select(GatewayEndpoint.HTTP_MTHD, GatewayEndpoint.API_PATH).where(
                and_(
                    GatewayEndpoint.CFG_ID == config_id,
                    GatewayEndpoint.DEL_YN == 'N',
                )
            )
        )
        existing_pairs = {(method, path) for method, path in result.all()}
        sequence_order = await SequenceService.next_sequence_value(db, config_id)

        endpoints = []
        for fields in endpoint_fields:
            if (fields["method"], fields["path"]) in existing_pairs:
                continue
            endpoint = GatewayEndpoint(
                ENDPT_ID=generate_id(),
                CFG_ID=config_id,
                SEQ_ORD=sequence_order,
                DEL_YN='N',
            )
            apply_endpoint_fields(endpoint, fields)
            endpoints.append(endpoint)
            sequence_order += SEQUENCE_STEP

        db.add_all(endpoints)
        await db.flush()
        return len(endpoints)

    @staticmethod
    async def _record_failure(
        db: AsyncSession,
        history: ImportHistory,
        history_id: str,
        message: str,
        processing_time_ms: int,
    ) -> None:
        """
        실패 이력 기록 (기록 실패가 원래 오류를 가리지 않도록 경고만 남김)

        ⚠️ 롤백 이후 세션에 남아 있는 이력 객체를 직접 갱신합니다.
        같은 세션의 이후 조회가 failed 상태를 보도록 하기 위함입니다.
        """
        try:
            history.IMPRT_STTS = ImportStatus.FAILED.value
            history.ERR_DTL = message
            history.PRCS_MS = processing_time_ms
            db.add(history)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.warning(
                f"Import 실패 이력 기록 실패: {str(e)}",
                extra={"extra_data": {"history_id": history_id}},
            )

    @staticmethod
    def _cleanup(file_path: str) -> None:
        """업로드 임시 파일 삭제 (실패해도 오류로 취급하지 않음)"""
        try:
            os.remove(file_path)
        except OSError as e:
            logger.warning(f"임시 파일 삭제 실패: {file_path} - {str(e)}")

    @staticmethod
    async def list_history(
        db: AsyncSession,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[ImportHistory], int]:
        """Import 이력 조회 (최신순)"""
        offset = (page - 1) * limit
        result = await db.execute(
            select(ImportHistory)
            .order_by(ImportHistory.IMPRT_DT.desc())
            .offset(offset)
            .limit(limit)
        )
        histories = list(result.scalars().all())

        count_result = await db.execute(select(func.count(ImportHistory.HIST_ID)))
        total = count_result.scalar() or 0

        return histories, total
