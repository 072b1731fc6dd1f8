"""
게이트웨이 설정 라우터
설정 CRUD 및 활성화 엔드포인트
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.exceptions import NotFoundError
from app.routers.dependencies import verify_api_key
from app.schemas.common import ResponseBase, PaginatedResponse
from app.schemas.gateway_config import (
    GatewayConfigCreate,
    GatewayConfigUpdate,
    GatewayConfigResponse,
    GatewayConfigDetailResponse,
)
from app.services.gateway_config_service import GatewayConfigService

router = APIRouter(prefix="/api/gateway/configs", tags=["Gateway Config"])


@router.get(
    "",
    response_model=PaginatedResponse[GatewayConfigResponse],
    summary="게이트웨이 설정 목록 조회",
)
async def list_configs(
    page: int = Query(1, ge=1, description="페이지 번호"),
    limit: int = Query(10, ge=1, le=100, description="페이지 크기"),
    db: AsyncSession = Depends(get_db),
):
    """삭제되지 않은 설정을 생성일시 내림차순으로 조회합니다."""
    configs, total = await GatewayConfigService.list_configs(db, page, limit)

    pages = (total + limit - 1) // limit

    return PaginatedResponse(
        data=[GatewayConfigResponse.from_model(config) for config in configs],
        total=total,
        page=page,
        limit=limit,
        pages=pages,
    )


@router.get(
    "/active",
    response_model=ResponseBase[GatewayConfigResponse],
    summary="활성 설정 조회",
)
async def get_active_config(db: AsyncSession = Depends(get_db)):
    config = await GatewayConfigService.get_active(db)
    if not config:
        raise NotFoundError("활성 게이트웨이 설정")
    return ResponseBase(data=GatewayConfigResponse.from_model(config))


@router.get(
    "/{config_id}",
    response_model=ResponseBase[GatewayConfigDetailResponse],
    summary="게이트웨이 설정 상세 조회",
    description="엔드포인트를 순서(sequence_order) 오름차순으로 포함합니다.",
)
async def get_config(config_id: str, db: AsyncSession = Depends(get_db)):
    config, endpoints = await GatewayConfigService.get_with_endpoints(db, config_id)
    return ResponseBase(
        data=GatewayConfigDetailResponse.from_model_with_endpoints(config, endpoints)
    )


@router.post(
    "",
    response_model=ResponseBase[GatewayConfigResponse],
    status_code=201,
    summary="게이트웨이 설정 생성",
)
async def create_config(
    data: GatewayConfigCreate,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(verify_api_key),
):
    """
    새 게이트웨이 설정을 생성합니다.

    ⚠️ 같은 내용(이름, 버전, 설명, OpenAPI 버전, 메타데이터)의 설정이 있으면 409를 반환합니다.
    """
    config = await GatewayConfigService.create(db, data)
    return ResponseBase(
        message="게이트웨이 설정이 생성되었습니다.",
        data=GatewayConfigResponse.from_model(config),
    )


@router.put(
    "/{config_id}",
    response_model=ResponseBase[GatewayConfigResponse],
    summary="게이트웨이 설정 수정",
)
async def update_config(
    config_id: str,
    data: GatewayConfigUpdate,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(verify_api_key),
):
    config = await GatewayConfigService.update(db, config_id, data)
    return ResponseBase(
        message="게이트웨이 설정이 수정되었습니다.",
        data=GatewayConfigResponse.from_model(config),
    )


@router.delete(
    "/{config_id}",
    response_model=ResponseBase,
    summary="게이트웨이 설정 삭제 (soft delete)",
)
async def delete_config(
    config_id: str,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(verify_api_key),
):
    await GatewayConfigService.remove(db, config_id)
    return ResponseBase(message="게이트웨이 설정이 삭제되었습니다.")


@router.post(
    "/{config_id}/activate",
    response_model=ResponseBase[GatewayConfigResponse],
    summary="게이트웨이 설정 활성화",
    description="다른 모든 설정은 비활성화됩니다.",
)
async def activate_config(
    config_id: str,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(verify_api_key),
):
    config = await GatewayConfigService.activate(db, config_id)
    return ResponseBase(
        message="게이트웨이 설정이 활성화되었습니다.",
        data=GatewayConfigResponse.from_model(config),
    )


@router.post(
    "/{config_id}/deactivate",
    response_model=ResponseBase[GatewayConfigResponse],
    summary="게이트웨이 설정 비활성화",
)
async def deactivate_config(
    config_id: str,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(verify_api_key),
):
    config = await GatewayConfigService.deactivate(db, config_id)
    return ResponseBase(
        message="게이트웨이 설정이 비활성화되었습니다.",
        data=GatewayConfigResponse.from_model(config),
    )
