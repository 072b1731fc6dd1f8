"""
게이트웨이 엔드포인트 스키마 정의
"""
from typing import Optional, Any, Literal
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD"]
IntegrationType = Literal["Lambda", "HTTP", "Mock", "StepFunction"]


def _upper_method(v: Any) -> Any:
    """메서드 대문자 변환"""
    return v.upper() if isinstance(v, str) else v


def _check_extension_keys(v: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """벤더 확장 키는 'x-'로 시작해야 함"""
    if v:
        invalid = [key for key in v if not str(key).startswith("x-")]
        if invalid:
            raise ValueError(f"확장 키는 'x-'로 시작해야 합니다: {', '.join(invalid)}")
    return v


class EndpointFields(BaseModel):
    """엔드포인트 공통 선택 필드"""
    operation_id: Optional[str] = Field(None, max_length=255, description="operationId")
    summary: Optional[str] = Field(None, max_length=500, description="요약")
    description: Optional[str] = Field(None, description="상세 설명")
    tags: Optional[list[str]] = Field(None, description="그룹 태그")
    target_url: Optional[str] = Field(None, description="프록시 대상 URL")
    headers: Optional[dict[str, Any]] = Field(None, description="헤더 파라미터 (이름 → 정의)")
    query_params: Optional[dict[str, Any]] = Field(None, description="쿼리 파라미터 (이름 → 정의)")
    path_params: Optional[dict[str, Any]] = Field(None, description="경로 파라미터 (이름 → 정의)")
    request_body: Optional[dict[str, Any]] = Field(None, description="requestBody")
    responses: Optional[dict[str, Any]] = Field(None, description="responses")
    security: Optional[Any] = Field(None, description="security 요구사항")
    authentication: Optional[dict[str, Any]] = Field(None, description="인증 설정")
    rate_limiting: Optional[dict[str, Any]] = Field(None, description="요청 제한 설정")
    cache_config: Optional[dict[str, Any]] = Field(None, description="캐시 설정")
    cors_config: Optional[dict[str, Any]] = Field(None, description="CORS 설정")
    integration_type: Optional[IntegrationType] = Field(None, description="통합 타입")
    integration_config: Optional[dict[str, Any]] = Field(None, description="통합 설정")
    x_extensions: Optional[dict[str, Any]] = Field(None, description="OpenAPI 확장 (x-*)")

    @field_validator("x_extensions")
    @classmethod
    def validate_extensions(cls, v):
        return _check_extension_keys(v)


class EndpointCreate(EndpointFields):
    """엔드포인트 생성 스키마"""
    method: HttpMethod = Field(..., description="HTTP 메서드")
    path: str = Field(..., min_length=1, max_length=500, description="경로 템플릿")

    @field_validator("method", mode="before")
    @classmethod
    def validate_method(cls, v):
        return _upper_method(v)


class EndpointUpdate(EndpointFields):
    """엔드포인트 수정 스키마 (부분 업데이트 지원)"""
    method: Optional[HttpMethod] = Field(None, description="HTTP 메서드")
    path: Optional[str] = Field(None, min_length=1, max_length=500, description="경로 템플릿")

    @field_validator("method", mode="before")
    @classmethod
    def validate_method(cls, v):
        return _upper_method(v)


class ReorderEndpointsRequest(BaseModel):
    """엔드포인트 순서 변경 요청"""
    endpoint_ids: list[str] = Field(..., description="원하는 순서대로 나열한 엔드포인트 ID")

    @field_validator("endpoint_ids")
    @classmethod
    def validate_unique(cls, v: list[str]) -> list[str]:
        if len(set(v)) != len(v):
            raise ValueError("엔드포인트 ID가 중복되었습니다.")
        return v


class EndpointResponse(BaseModel):
    """엔드포인트 응답 스키마"""
    id: str
    config_id: str
    sequence_order: int
    method: str
    path: str
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[list[str]] = None
    target_url: Optional[str] = None
    headers: Optional[dict[str, Any]] = None
    query_params: Optional[dict[str, Any]] = None
    path_params: Optional[dict[str, Any]] = None
    request_body: Optional[dict[str, Any]] = None
    responses: Optional[dict[str, Any]] = None
    security: Optional[Any] = None
    authentication: Optional[dict[str, Any]] = None
    rate_limiting: Optional[dict[str, Any]] = None
    cache_config: Optional[dict[str, Any]] = None
    cors_config: Optional[dict[str, Any]] = None
    integration_type: Optional[str] = None
    integration_config: Optional[dict[str, Any]] = None
    x_extensions: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
