"""
구조화된 로깅 및 요청/응답 로깅

JSON 형식의 구조화된 로그와 요청/응답 추적을 제공합니다.
"""
import inspect
import logging
import json
import time
import uuid
from datetime import datetime, timezone
from typing import Optional
from functools import wraps

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


# JSON 로그 포매터
class JSONFormatter(logging.Formatter):
    """JSON 형식의 로그 포매터"""

    EXTRA_FIELDS = (
        "request_id",
        "method",
        "path",
        "status_code",
        "duration_ms",
        "client_ip",
        "user_agent",
    )

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # 추가 필드
        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)
        if hasattr(record, "extra_data") and isinstance(record.extra_data, dict):
            log_data.update(record.extra_data)

        # 예외 정보
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


# 로거 설정
def setup_logger(
    name: str = "gateway_editor",
    level: int = logging.INFO,
    json_format: bool = True,
) -> logging.Logger:
    """로거 설정"""
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 기존 핸들러 제거
    logger.handlers.clear()

    # 콘솔 핸들러
    handler = logging.StreamHandler()
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        ))

    logger.addHandler(handler)
    return logger


# 기본 로거
logger = setup_logger()


def get_logger(name: str) -> logging.Logger:
    """기본 로거 하위의 모듈 로거 반환 (핸들러는 부모에서 상속)"""
    return logger.getChild(name)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """요청/응답 로깅 미들웨어"""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or get_logger("request")

    async def dispatch(self, request: Request, call_next) -> Response:
        # 요청 ID 생성
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()

        client_ip = request.client.host if request.client else "unknown"
        user_agent = request.headers.get("user-agent", "unknown")

        # 요청 로그
        self.logger.info(
            f"→ {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client_ip": client_ip,
                "user_agent": user_agent,
                "extra_data": {
                    "query_params": str(request.query_params) if request.query_params else None,
                }
            }
        )

        try:
            response = await call_next(request)
            duration_ms = round((time.time() - start_time) * 1000, 2)

            level = logging.INFO if response.status_code < 400 else logging.WARNING
            if response.status_code >= 500:
                level = logging.ERROR

            self.logger.log(
                level,
                f"← {response.status_code} ({duration_ms}ms)",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                    "client_ip": client_ip,
                }
            )

            # 응답 헤더에 요청 ID 추가
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            return response

        except Exception as e:
            duration_ms = round((time.time() - start_time) * 1000, 2)

            self.logger.error(
                f"✗ Error: {str(e)} ({duration_ms}ms)",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                    "client_ip": client_ip,
                    "extra_data": {"error": str(e)}
                },
                exc_info=True,
            )
            raise


def log_execution(func):
    """실행 시간 로깅 데코레이터"""
    func_logger = get_logger("service")

    @wraps(func)
    async def async_wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            result = await func(*args, **kwargs)
            duration_ms = round((time.time() - start_time) * 1000, 2)
            func_logger.debug(
                f"{func.__qualname__} 실행 완료 ({duration_ms}ms)",
                extra={"duration_ms": duration_ms}
            )
            return result
        except Exception as e:
            duration_ms = round((time.time() - start_time) * 1000, 2)
            func_logger.error(
                f"{func.__qualname__} 실행 실패: {str(e)} ({duration_ms}ms)",
                extra={"duration_ms": duration_ms, "extra_data": {"error": str(e)}},
            )
            raise

    @wraps(func)
    def sync_wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            result = func(*args, **kwargs)
            duration_ms = round((time.time() - start_time) * 1000, 2)
            func_logger.debug(
                f"{func.__qualname__} 실행 완료 ({duration_ms}ms)",
                extra={"duration_ms": duration_ms}
            )
            return result
        except Exception as e:
            duration_ms = round((time.time() - start_time) * 1000, 2)
            func_logger.error(
                f"{func.__qualname__} 실행 실패: {str(e)} ({duration_ms}ms)",
                extra={"duration_ms": duration_ms, "extra_data": {"error": str(e)}},
            )
            raise

    if inspect.iscoroutinefunction(func):
        return async_wrapper
    return sync_wrapper
