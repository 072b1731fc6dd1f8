"""
게이트웨이 엔드포인트 라우터
설정에 속한 엔드포인트 CRUD 및 순서 변경
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.routers.dependencies import verify_api_key
from app.schemas.common import ResponseBase
from app.schemas.endpoint import (
    EndpointCreate,
    EndpointUpdate,
    EndpointResponse,
    ReorderEndpointsRequest,
)
from app.services.endpoint_service import EndpointService

router = APIRouter(prefix="/api/gateway/configs/{config_id}/endpoints", tags=["Gateway Endpoint"])


@router.get(
    "",
    response_model=ResponseBase[list[EndpointResponse]],
    summary="엔드포인트 목록 조회",
)
async def list_endpoints(config_id: str, db: AsyncSession = Depends(get_db)):
    """삭제되지 않은 엔드포인트를 sequence_order 오름차순으로 조회합니다."""
    endpoints = await EndpointService.list_endpoints(db, config_id)
    return ResponseBase(data=[EndpointResponse.model_validate(e) for e in endpoints])


# ⚠️ /reorder는 /{endpoint_id}보다 먼저 등록
@router.put(
    "/reorder",
    response_model=ResponseBase,
    summary="엔드포인트 순서 변경",
    description="목록 순서대로 sequence_order를 10, 20, 30...으로 재지정합니다. 목록에 없는 엔드포인트는 유지됩니다.",
)
async def reorder_endpoints(
    config_id: str,
    data: ReorderEndpointsRequest,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(verify_api_key),
):
    await EndpointService.reorder(db, config_id, data.endpoint_ids)
    return ResponseBase(message="엔드포인트 순서가 변경되었습니다.")


@router.get(
    "/{endpoint_id}",
    response_model=ResponseBase[EndpointResponse],
    summary="엔드포인트 상세 조회",
)
async def get_endpoint(config_id: str, endpoint_id: str, db: AsyncSession = Depends(get_db)):
    endpoint = await EndpointService.get_by_id(db, config_id, endpoint_id)
    return ResponseBase(data=EndpointResponse.model_validate(endpoint))


@router.post(
    "",
    response_model=ResponseBase[EndpointResponse],
    status_code=201,
    summary="엔드포인트 생성",
)
async def create_endpoint(
    config_id: str,
    data: EndpointCreate,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(verify_api_key),
):
    """
    엔드포인트를 생성합니다.

    ⚠️ 같은 설정에 (method, path)가 같은 엔드포인트가 있으면 409를 반환합니다.
    """
    endpoint = await EndpointService.create(db, config_id, data)
    return ResponseBase(
        message="엔드포인트가 생성되었습니다.",
        data=EndpointResponse.model_validate(endpoint),
    )


@router.put(
    "/{endpoint_id}",
    response_model=ResponseBase[EndpointResponse],
    summary="엔드포인트 수정",
)
async def update_endpoint(
    config_id: str,
    endpoint_id: str,
    data: EndpointUpdate,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(verify_api_key),
):
    endpoint = await EndpointService.update(db, config_id, endpoint_id, data)
    return ResponseBase(
        message="엔드포인트가 수정되었습니다.",
        data=EndpointResponse.model_validate(endpoint),
    )


@router.delete(
    "/{endpoint_id}",
    response_model=ResponseBase,
    summary="엔드포인트 삭제 (soft delete)",
)
async def delete_endpoint(
    config_id: str,
    endpoint_id: str,
    db: AsyncSession = Depends(get_db),
    _: str = Depends(verify_api_key),
):
    await EndpointService.remove(db, config_id, endpoint_id)
    return ResponseBase(message="엔드포인트가 삭제되었습니다.")
