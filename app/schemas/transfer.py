"""
Import / Export 스키마 정의
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class ImportResult(BaseModel):
    """Import 결과"""
    success: bool = True
    config_id: str
    endpoints_count: int
    processing_time_ms: int


class ImportHistoryResponse(BaseModel):
    """Import 이력 응답 스키마"""
    id: str
    config_id: Optional[str]
    file_name: str
    file_size: Optional[int]
    file_type: Optional[str]
    status: str
    error_details: Optional[str]
    endpoints_count: Optional[int]
    processing_time_ms: Optional[int]
    imported_at: datetime
    imported_by: Optional[str]

    class Config:
        from_attributes = True


class ExportStatusResponse(BaseModel):
    """Export 캐시 상태"""
    cached: bool
    formats: list[str]
