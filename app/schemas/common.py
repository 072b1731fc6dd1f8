"""
공통 스키마 정의
"""
from typing import Any, Optional, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ResponseBase(BaseModel, Generic[T]):
    """기본 응답 스키마"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None

    class Config:
        from_attributes = True


class ErrorResponse(BaseModel):
    """에러 응답 스키마"""
    success: bool = False
    error: str
    message: str
    details: Optional[Any] = None


class PaginatedResponse(BaseModel, Generic[T]):
    """페이지네이션 응답 스키마"""
    success: bool = True
    data: list[T]
    total: int
    page: int
    limit: int
    pages: int

    class Config:
        from_attributes = True
