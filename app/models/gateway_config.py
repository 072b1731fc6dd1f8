"""
게이트웨이 설정 모델
OpenAPI 문서 단위의 게이트웨이 설정(이름, 버전, 메타데이터, 활성 상태)을 관리합니다.

테이블명: APP_GTWY_CFG_L
네이밍 규칙: 기존 DB 패턴 준수 (대문자 약어 컬럼, *_YN 플래그)
"""
from sqlalchemy import Column, String, Text, DateTime, JSON, Index
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow

# 지원하는 OpenAPI 버전
OPENAPI_VERSIONS = ("3.0.0", "3.0.1", "3.0.2", "3.0.3", "3.1.0")
DEFAULT_OPENAPI_VERSION = "3.0.0"


class GatewayConfig(Base):
    """
    게이트웨이 설정 테이블

    하나의 OpenAPI 문서에 대응합니다.
    - FILE_HASH: 중복 생성/Import 감지용 콘텐츠 해시
    - ACTV_YN: 활성 설정 여부 (전체에서 최대 1개만 'Y')
    - META_DATA: servers, security, tags, externalDocs 원본 조각

    ⚠️ 삭제는 DEL_YN/DEL_DT만 설정하는 soft delete입니다.
    """
    __tablename__ = "APP_GTWY_CFG_L"

    # Primary Key
    CFG_ID = Column(String(50), primary_key=True, comment="설정 고유 ID")

    # 기본 정보 (OpenAPI info)
    CFG_NAME = Column(String(255), nullable=False, comment="설정 이름 (info.title)")
    CFG_VER = Column(String(50), nullable=False, comment="설정 버전 (info.version)")
    CFG_DESC = Column(Text, nullable=True, comment="설정 설명 (info.description)")
    OAS_VER = Column(String(10), default=DEFAULT_OPENAPI_VERSION, nullable=False, comment="OpenAPI 스펙 버전")

    # 중복 감지용 해시 (삭제되지 않은 행 사이에서 유일, 서비스에서 검증)
    FILE_HASH = Column(String(64), nullable=True, comment="콘텐츠 SHA-256 해시")

    # 상태 관리
    ACTV_YN = Column(String(1), default='N', nullable=False, comment="활성 여부 (Y/N)")
    DEL_YN = Column(String(1), default='N', nullable=False, comment="삭제 여부 (Y/N)")

    # 문서 루트 메타데이터 (servers, security, tags, externalDocs)
    META_DATA = Column(JSON, nullable=True, comment="OpenAPI 루트 메타데이터")

    # 타임스탬프
    CREA_DT = Column(DateTime, default=utcnow, nullable=False, comment="생성일시")
    UPDT_DT = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False, comment="수정일시")
    DEL_DT = Column(DateTime, nullable=True, comment="삭제일시")

    # Relationships (명시적 selectinload로만 로드)
    endpoints = relationship(
        "GatewayEndpoint",
        back_populates="config",
        cascade="all",
        passive_deletes=True,
        lazy="raise",
    )

    # Indexes
    __table_args__ = (
        Index("IDX_GTWY_CFG_ACTV_YN", "ACTV_YN"),
        Index("IDX_GTWY_CFG_HASH", "FILE_HASH"),
        Index("IDX_GTWY_CFG_DEL_YN", "DEL_YN"),
    )

    # Python 속성으로 접근 편의성 제공
    @property
    def id(self):
        return self.CFG_ID

    @property
    def name(self):
        return self.CFG_NAME

    @property
    def version(self):
        return self.CFG_VER

    @property
    def description(self):
        return self.CFG_DESC

    @property
    def openapi_version(self):
        return self.OAS_VER or DEFAULT_OPENAPI_VERSION

    @property
    def file_hash(self):
        return self.FILE_HASH

    @property
    def is_active(self):
        return self.ACTV_YN == 'Y'

    @property
    def is_deleted(self):
        return self.DEL_YN == 'Y'

    @property
    def metadata_(self):
        # `metadata`는 Declarative Base 예약어
        return self.META_DATA

    @property
    def created_at(self):
        return self.CREA_DT

    @property
    def updated_at(self):
        return self.UPDT_DT

    @property
    def deleted_at(self):
        return self.DEL_DT

    def __repr__(self):
        return f"<GatewayConfig(id={self.CFG_ID}, name='{self.CFG_NAME}', version='{self.CFG_VER}')>"


# 스키마 필드명 → 컬럼명 매핑 (생성/수정 시 사용)
CONFIG_FIELD_COLUMNS = {
    "name": "CFG_NAME",
    "version": "CFG_VER",
    "description": "CFG_DESC",
    "openapi_version": "OAS_VER",
    "metadata": "META_DATA",
}
