"""
Import / Export 라우터
OpenAPI 파일 업로드(Import)와 문서 다운로드(Export)
"""
import os
from typing import Literal
from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.routers.dependencies import verify_api_key, get_client_ip
from app.schemas.common import ResponseBase, PaginatedResponse
from app.schemas.transfer import ImportResult, ImportHistoryResponse, ExportStatusResponse
from app.services.document_assembler import MEDIA_TYPES
from app.services.export_service import ExportService, export_filename
from app.services.identity_service import generate_id
from app.services.import_service import ImportService

router = APIRouter(prefix="/api/gateway", tags=["Import / Export"])
logger = get_logger("transfer")

UPLOAD_CHUNK_SIZE = 1024 * 1024


async def save_upload(file: UploadFile) -> tuple[str, int]:
    """
    업로드 파일을 UPLOAD_DIR에 임시 저장

    ⚠️ MAX_UPLOAD_SIZE를 넘으면 저장한 파일을 지우고 ValidationError를 발생시킵니다.

    Returns:
        (임시 파일 경로, 파일 크기)
    """
    settings = get_settings()
    os.makedirs(settings.upload_dir, exist_ok=True)
    _, ext = os.path.splitext(file.filename or "")
    file_path = os.path.join(settings.upload_dir, f"import-{generate_id()}{ext}")

    size = 0
    try:
        with open(file_path, "wb") as out:
            while True:
                chunk = await file.read(UPLOAD_CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > settings.max_upload_size:
                    break
                out.write(chunk)
    except Exception:
        # 수신 중단 등으로 실패하면 쓰다 만 파일을 남기지 않음
        ImportService._cleanup(file_path)
        raise

    if size > settings.max_upload_size:
        os.remove(file_path)
        raise ValidationError(
            f"업로드 파일이 너무 큽니다. (최대 {settings.max_upload_size} bytes)",
            field="file",
            details={"max_upload_size": settings.max_upload_size},
        )
    return file_path, size


# ==================== Import ====================

@router.post(
    "/import",
    response_model=ImportResult,
    status_code=201,
    summary="OpenAPI 파일 Import",
    description="ZIP, YAML, JSON 형식의 OpenAPI 3.x 명세를 업로드합니다.",
)
async def import_file(
    request: Request,
    file: UploadFile = File(..., description="ZIP, YAML 또는 JSON 파일"),
    db: AsyncSession = Depends(get_db),
    _: str = Depends(verify_api_key),
):
    file_path, size = await save_upload(file)
    logger.info(
        f"Import 요청: {file.filename} ({size} bytes)",
        extra={"client_ip": get_client_ip(request)},
    )
    return await ImportService.import_file(
        db,
        file_path=file_path,
        filename=file.filename or os.path.basename(file_path),
        mime_type=file.content_type,
        file_size=size,
        imported_by="admin",
    )


@router.get(
    "/import/history",
    response_model=PaginatedResponse[ImportHistoryResponse],
    summary="Import 이력 조회",
)
async def list_import_history(
    page: int = Query(1, ge=1, description="페이지 번호"),
    limit: int = Query(10, ge=1, le=100, description="페이지 크기"),
    db: AsyncSession = Depends(get_db),
):
    histories, total = await ImportService.list_history(db, page, limit)
    return PaginatedResponse(
        data=[ImportHistoryResponse.model_validate(h) for h in histories],
        total=total,
        page=page,
        limit=limit,
        pages=(total + limit - 1) // limit,
    )


# ==================== Export ====================

@router.get(
    "/export/{config_id}",
    summary="OpenAPI 문서 Export",
    description="설정을 OpenAPI 문서로 내려받습니다. 결과는 CACHE_TTL 동안 캐시됩니다.",
)
async def export_config(
    config_id: str,
    format: Literal["json", "yaml"] = Query("yaml", description="출력 형식"),
    db: AsyncSession = Depends(get_db),
):
    content = await ExportService.export_config(db, config_id, format)
    return Response(
        content=content,
        media_type=MEDIA_TYPES[format],
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(config_id, format)}"',
        },
    )


@router.get(
    "/export/{config_id}/status",
    response_model=ResponseBase[ExportStatusResponse],
    summary="Export 캐시 상태 조회",
)
async def export_status(config_id: str, db: AsyncSession = Depends(get_db)):
    status = await ExportService.get_export_status(db, config_id)
    return ResponseBase(data=status)


@router.get(
    "/export/{config_id}/preview",
    response_model=ResponseBase[dict],
    summary="OpenAPI 문서 미리보기",
    description="캐시를 거치지 않고 조립한 문서를 JSON으로 반환합니다.",
)
async def export_preview(config_id: str, db: AsyncSession = Depends(get_db)):
    document = await ExportService.build_document(db, config_id)
    return ResponseBase(data=document)
