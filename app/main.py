"""
OpenAPI Gateway Editor - 메인 애플리케이션

OpenAPI 3.x 기반 게이트웨이 설정을 관리하는 백엔드입니다.

주요 기능:
- 게이트웨이 설정 및 엔드포인트 CRUD (순서 관리 포함)
- OpenAPI 파일(JSON/YAML/ZIP) Import 및 이력 기록
- JSON/YAML Export 및 TTL 기반 캐시
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.core.database import init_db
from app.core.exceptions import GatewayEditorError, get_user_friendly_message
from app.core.logging import RequestLoggingMiddleware, logger
from app.routers import gateway_router, endpoint_router, transfer_router, health_router

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 생명주기 관리"""
    # Startup
    logger.info(f"{settings.app_name} 시작 중...")
    await init_db()
    logger.info(f"서버 준비 완료: {settings.app_name}")

    yield

    # Shutdown
    logger.info("서버 종료 중...")


# FastAPI 앱 생성
app = FastAPI(
    title=settings.app_name,
    description="""
## OpenAPI Gateway Editor

OpenAPI 명세 기반 게이트웨이 설정을 편집하고 Import/Export 하는 API입니다.

### 엔드포인트 구조

- `/api/gateway/configs` - 게이트웨이 설정 관리
- `/api/gateway/configs/{config_id}/endpoints` - 엔드포인트 관리 및 순서 변경
- `/api/gateway/import` - OpenAPI 파일 Import (API 키 필요)
- `/api/gateway/export/{config_id}` - OpenAPI 문서 Export
- `/health` - 헬스체크
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# 요청/응답 로깅 미들웨어
app.add_middleware(RequestLoggingMiddleware)

# CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Request-ID"],
)


# ==================================
# 예외 핸들러
# ==================================

@app.exception_handler(GatewayEditorError)
async def gateway_editor_error_handler(request: Request, exc: GatewayEditorError):
    """게이트웨이 에디터 커스텀 예외 처리"""
    logger.warning(
        f"API Error: {exc.error_code} - {exc.message}",
        extra={
            "extra_data": {
                "error_code": exc.error_code,
                "status_code": exc.status_code,
                "details": exc.details,
            }
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """FastAPI 요청 유효성 검증 오류 처리"""
    errors = exc.errors()

    # 첫 번째 오류의 상세 정보
    first_error = errors[0] if errors else {}
    field = ".".join(str(loc) for loc in first_error.get("loc", []))
    message = first_error.get("msg", "입력값이 올바르지 않습니다.")

    logger.warning(
        f"Validation Error: {field} - {message}",
        extra={"extra_data": {"errors": [err.get("msg") for err in errors]}}
    )

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "VALIDATION_ERROR",
            "message": f"입력값 오류: {message}",
            "details": {
                "field": field,
                "errors": [
                    {
                        "field": ".".join(str(loc) for loc in err.get("loc", [])),
                        "message": err.get("msg"),
                        "type": err.get("type"),
                    }
                    for err in errors
                ],
            },
        },
    )


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_handler(request: Request, exc: PydanticValidationError):
    """Pydantic 유효성 검증 오류 처리"""
    errors = exc.errors()

    first_error = errors[0] if errors else {}
    field = ".".join(str(loc) for loc in first_error.get("loc", []))
    message = first_error.get("msg", "데이터 형식이 올바르지 않습니다.")

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "VALIDATION_ERROR",
            "message": f"데이터 형식 오류: {message}",
            "details": {"field": field},
        },
    )


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
    """SQLAlchemy 데이터베이스 오류 처리"""
    logger.error(
        f"Database Error: {str(exc)}",
        extra={"extra_data": {"error_type": type(exc).__name__}},
        exc_info=True,
    )

    message = get_user_friendly_message("DATABASE_ERROR")
    if settings.debug:
        message = f"데이터베이스 오류: {str(exc)[:200]}"

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "DATABASE_ERROR",
            "message": message,
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """전역 예외 처리 (catch-all)"""
    logger.error(
        f"Unhandled Error: {type(exc).__name__} - {str(exc)}",
        exc_info=True,
    )

    if settings.debug:
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "INTERNAL_ERROR",
                "message": str(exc),
                "type": type(exc).__name__,
            }
        )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "INTERNAL_ERROR",
            "message": get_user_friendly_message("INTERNAL_ERROR"),
        }
    )


# 라우터 등록
app.include_router(health_router)
app.include_router(gateway_router)
app.include_router(endpoint_router)
app.include_router(transfer_router)


@app.get("/info", tags=["Root"])
async def info():
    """서비스 정보"""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
