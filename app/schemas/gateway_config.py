"""
게이트웨이 설정 스키마 정의
"""
from typing import Optional, Any, Literal
from datetime import datetime
from pydantic import BaseModel, Field

from app.schemas.endpoint import EndpointResponse

OpenApiVersion = Literal["3.0.0", "3.0.1", "3.0.2", "3.0.3", "3.1.0"]


class GatewayConfigCreate(BaseModel):
    """게이트웨이 설정 생성 스키마"""
    name: str = Field(..., min_length=1, max_length=255, description="설정 이름")
    version: str = Field(..., min_length=1, max_length=50, description="설정 버전 (semver)")
    description: Optional[str] = Field(None, description="설정 설명")
    openapi_version: OpenApiVersion = Field(default="3.0.0", description="OpenAPI 버전")
    metadata: Optional[dict[str, Any]] = Field(
        None,
        description="문서 루트 메타데이터 (servers, security, tags, externalDocs)",
    )


class GatewayConfigUpdate(BaseModel):
    """게이트웨이 설정 수정 스키마 (부분 업데이트 지원)"""
    name: Optional[str] = Field(None, min_length=1, max_length=255, description="설정 이름")
    version: Optional[str] = Field(None, min_length=1, max_length=50, description="설정 버전")
    description: Optional[str] = Field(None, description="설정 설명")
    openapi_version: Optional[OpenApiVersion] = Field(None, description="OpenAPI 버전")
    metadata: Optional[dict[str, Any]] = Field(None, description="문서 루트 메타데이터")


class GatewayConfigResponse(BaseModel):
    """게이트웨이 설정 응답 스키마"""
    id: str
    name: str
    version: str
    description: Optional[str]
    openapi_version: str
    file_hash: Optional[str]
    is_active: bool
    metadata: Optional[dict[str, Any]]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, config) -> "GatewayConfigResponse":
        # ORM의 `metadata` 속성은 Declarative MetaData이므로 직접 매핑
        return cls(
            id=config.CFG_ID,
            name=config.CFG_NAME,
            version=config.CFG_VER,
            description=config.CFG_DESC,
            openapi_version=config.openapi_version,
            file_hash=config.FILE_HASH,
            is_active=config.ACTV_YN == 'Y',
            metadata=config.META_DATA,
            created_at=config.CREA_DT,
            updated_at=config.UPDT_DT,
        )


class GatewayConfigDetailResponse(GatewayConfigResponse):
    """게이트웨이 설정 상세 응답 스키마 (엔드포인트 포함, sequence 순)"""
    endpoints: list[EndpointResponse] = []

    @classmethod
    def from_model_with_endpoints(cls, config, endpoints) -> "GatewayConfigDetailResponse":
        base = GatewayConfigResponse.from_model(config)
        return cls(
            **base.model_dump(),
            endpoints=[EndpointResponse.model_validate(e) for e in endpoints],
        )
