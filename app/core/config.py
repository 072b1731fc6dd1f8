"""
애플리케이션 설정 관리
환경 변수 및 기본 설정을 관리합니다.
"""
import os
import tempfile
from functools import lru_cache
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# .env 파일 로드
load_dotenv()


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # Database (MySQL)
    mysql_host: str = os.getenv("MYSQL_HOST", "localhost")
    mysql_user: str = os.getenv("MYSQL_USER", "root")
    mysql_password: str = os.getenv("MYSQL_PASSWORD", "")
    mysql_db: str = os.getenv("MYSQL_DB", "gateway_editor")
    mysql_port: int = int(os.getenv("MYSQL_PORT", "3306"))
    mysql_pool_size: int = int(os.getenv("MYSQL_POOL_SIZE", "10"))

    # 전체 연결 URL 직접 지정 (로컬 SQLite 실행, 테스트용)
    database_url_override: str = os.getenv("DATABASE_URL", "")

    @property
    def database_url(self) -> str:
        """SQLAlchemy 비동기 연결 URL 생성"""
        if self.database_url_override:
            return self.database_url_override
        return f"mysql+aiomysql://{self.mysql_user}:{self.mysql_password}@{self.mysql_host}:{self.mysql_port}/{self.mysql_db}"

    @property
    def is_sqlite(self) -> bool:
        """SQLite 사용 여부 (커넥션 풀 옵션 적용 불가)"""
        return self.database_url.startswith("sqlite")

    # Security
    api_key: str = os.getenv("API_KEY", "your-admin-api-key")

    # CORS 설정 (쉼표로 구분된 도메인 목록)
    cors_origins: str = os.getenv("CORS_ORIGINS", "http://localhost:4200,http://127.0.0.1:4200")

    @property
    def cors_origins_list(self) -> list[str]:
        """CORS 허용 도메인 목록 반환"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Application
    app_name: str = "OpenAPI Gateway Editor"
    debug: bool = os.getenv("ENV", "dev") == "dev"

    # Export 캐시 설정
    cache_ttl: int = int(os.getenv("CACHE_TTL", "3600"))  # 캐시 유효 시간 (초)

    # Import 업로드 설정
    upload_dir: str = os.getenv("UPLOAD_DIR", tempfile.gettempdir())
    max_upload_size: int = int(os.getenv("MAX_UPLOAD_SIZE", str(10 * 1024 * 1024)))  # 10MB

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 반환"""
    return Settings()
