"""
사용자 정의 예외 클래스 및 에러 핸들링

이 모듈은 게이트웨이 설정 관리 중 발생할 수 있는 예외를 정의하고
사용자 친화적인 에러 메시지를 제공합니다.
"""
from typing import Optional, Any


class GatewayEditorError(Exception):
    """게이트웨이 에디터 기본 예외 클래스"""

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """에러를 딕셔너리로 변환"""
        result = {
            "success": False,
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(GatewayEditorError):
    """유효성 검증 오류 (잘못된 업로드, OpenAPI 스키마 위반 등)"""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details={"field": field, **(details or {})} if field else details,
        )


class InvalidReferenceError(ValidationError):
    """다른 설정에 속하거나 존재하지 않는 ID 참조"""

    def __init__(self, resource: str, invalid_ids: list[str]):
        super().__init__(
            message=f"유효하지 않은 {resource} ID: {', '.join(invalid_ids)}",
            details={"resource": resource, "invalid_ids": list(invalid_ids)},
        )
        self.error_code = "INVALID_REFERENCE"
        self.invalid_ids = list(invalid_ids)


class NotFoundError(GatewayEditorError):
    """리소스를 찾을 수 없음"""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource}을(를) 찾을 수 없습니다."
        if identifier:
            message = f"{resource} '{identifier}'을(를) 찾을 수 없습니다."
        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=404,
            details={"resource": resource, "identifier": str(identifier) if identifier else None},
        )


class DuplicateError(GatewayEditorError):
    """중복 데이터 오류"""

    def __init__(self, resource: str, field: str, value: Any):
        super().__init__(
            message=f"이미 존재하는 {resource}입니다: {field}={value}",
            error_code="DUPLICATE_ERROR",
            status_code=409,
            details={"resource": resource, "field": field, "value": str(value)},
        )


class AuthenticationError(GatewayEditorError):
    """인증 오류"""

    def __init__(self, message: str = "유효하지 않은 API 키입니다."):
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_ERROR",
            status_code=401,
        )


class SerializationError(GatewayEditorError):
    """문서 직렬화/파싱 중 내부 오류 (사용자 입력과 무관)"""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(
            message=message,
            error_code="SERIALIZATION_ERROR",
            status_code=500,
            details=details,
        )


# 에러 코드 → 사용자 친화적 메시지 매핑
ERROR_MESSAGES = {
    "INTERNAL_ERROR": "서버 내부 오류가 발생했습니다. 잠시 후 다시 시도해주세요.",
    "VALIDATION_ERROR": "입력값이 올바르지 않습니다.",
    "INVALID_REFERENCE": "요청에 유효하지 않은 ID가 포함되어 있습니다.",
    "NOT_FOUND": "요청한 리소스를 찾을 수 없습니다.",
    "DUPLICATE_ERROR": "이미 존재하는 데이터입니다.",
    "AUTHENTICATION_ERROR": "인증이 필요합니다. API 키를 확인해주세요.",
    "SERIALIZATION_ERROR": "문서를 생성하는 중 오류가 발생했습니다.",
    "DATABASE_ERROR": "데이터베이스 오류가 발생했습니다.",
}


def get_user_friendly_message(error_code: str) -> str:
    """에러 코드에 대한 사용자 친화적 메시지 반환"""
    return ERROR_MESSAGES.get(error_code, ERROR_MESSAGES["INTERNAL_ERROR"])
