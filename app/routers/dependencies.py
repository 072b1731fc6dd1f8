"""
라우터 공통 의존성
"""
from typing import Optional
from fastapi import Header, Request

from app.core.config import get_settings
from app.core.exceptions import AuthenticationError


async def verify_api_key(
    x_api_key: Optional[str] = Header(None, description="관리자 API 키"),
) -> str:
    """API 키 검증 (변경 작업 전용)"""
    if not x_api_key or x_api_key != get_settings().api_key:
        raise AuthenticationError()
    return x_api_key


def get_client_ip(request: Request) -> str:
    """클라이언트 IP 추출"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"
