"""
게이트웨이 엔드포인트 모델
설정에 속한 개별 OpenAPI 오퍼레이션(경로 + 메서드)을 관리합니다.

테이블명: APP_GTWY_ENDPT_L
네이밍 규칙: 기존 DB 패턴 준수
"""
from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship
from app.core.database import Base, utcnow

# OpenAPI에서 인식하는 HTTP 메서드 (문서 순회 순서)
HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS", "HEAD")

# 게이트웨이 통합 타입
INTEGRATION_TYPES = ("Lambda", "HTTP", "Mock", "StepFunction")


class GatewayEndpoint(Base):
    """
    게이트웨이 엔드포인트 테이블

    OpenAPI 오퍼레이션 조각은 구조를 해석하지 않고 JSON 그대로 저장합니다.
    - PATH_PARAMS / QRY_PARAMS / HDR_PARAMS: 파라미터 이름 → 정의 맵
    - REQ_BODY / RESPS / SCRTY: requestBody, responses, security 원본
    - X_EXTS: x-* 벤더 확장
    - AUTHN / RATE_LMT / CACHE_CFG / CORS_CFG / INTG_CFG: 게이트웨이 전용 설정

    ⚠️ (CFG_ID, HTTP_MTHD, API_PATH)는 삭제되지 않은 행 사이에서 유일해야 합니다.
    soft delete된 행이 남아 있으므로 DB 유니크 제약 대신 서비스에서 검증합니다.
    """
    __tablename__ = "APP_GTWY_ENDPT_L"

    # Primary Key
    ENDPT_ID = Column(String(50), primary_key=True, comment="엔드포인트 고유 ID")

    # Foreign Key
    CFG_ID = Column(
        String(50),
        ForeignKey("APP_GTWY_CFG_L.CFG_ID", ondelete="CASCADE"),
        nullable=False,
    )

    # 정렬 순서 (10 단위 간격)
    SEQ_ORD = Column(Integer, nullable=False, comment="표시/Export 순서")

    # 오퍼레이션 식별 정보
    HTTP_MTHD = Column(String(10), nullable=False, comment="HTTP 메서드 (대문자)")
    API_PATH = Column(String(500), nullable=False, comment="경로 템플릿 (예: /pets/{petId})")
    OPER_ID = Column(String(255), nullable=True, comment="operationId")
    SMRY = Column(String(500), nullable=True, comment="summary")
    ENDPT_DESC = Column(Text, nullable=True, comment="description")
    TAGS = Column(JSON, nullable=True, comment="태그 목록")
    TRGT_URL = Column(Text, nullable=True, comment="프록시 대상 URL")

    # OpenAPI 오퍼레이션 조각
    HDR_PARAMS = Column(JSON, nullable=True, comment="헤더 파라미터")
    QRY_PARAMS = Column(JSON, nullable=True, comment="쿼리 파라미터")
    PATH_PARAMS = Column(JSON, nullable=True, comment="경로 파라미터")
    REQ_BODY = Column(JSON, nullable=True, comment="requestBody")
    RESPS = Column(JSON, nullable=True, comment="responses")
    SCRTY = Column(JSON, nullable=True, comment="security 요구사항")
    X_EXTS = Column(JSON, nullable=True, comment="x-* 확장")

    # 게이트웨이 전용 설정
    AUTHN = Column(JSON, nullable=True, comment="인증 설정")
    RATE_LMT = Column(JSON, nullable=True, comment="요청 제한 설정")
    CACHE_CFG = Column(JSON, nullable=True, comment="캐시 설정")
    CORS_CFG = Column(JSON, nullable=True, comment="CORS 설정")
    INTG_TYPE = Column(String(50), nullable=True, comment="통합 타입: Lambda, HTTP, Mock, StepFunction")
    INTG_CFG = Column(JSON, nullable=True, comment="통합 설정")

    # 상태 관리
    DEL_YN = Column(String(1), default='N', nullable=False, comment="삭제 여부 (Y/N)")

    # 타임스탬프
    CREA_DT = Column(DateTime, default=utcnow, nullable=False, comment="생성일시")
    UPDT_DT = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False, comment="수정일시")
    DEL_DT = Column(DateTime, nullable=True, comment="삭제일시")

    # Relationships
    config = relationship("GatewayConfig", back_populates="endpoints", lazy="raise")

    # Indexes
    __table_args__ = (
        Index("IDX_GTWY_ENDPT_CFG_MTHD_PATH", "CFG_ID", "HTTP_MTHD", "API_PATH"),
        Index("IDX_GTWY_ENDPT_ORDER", "CFG_ID", "SEQ_ORD"),
        Index("IDX_GTWY_ENDPT_OPER_ID", "OPER_ID"),
    )

    # Python 속성으로 접근 편의성 제공
    @property
    def id(self):
        return self.ENDPT_ID

    @property
    def config_id(self):
        return self.CFG_ID

    @property
    def sequence_order(self):
        return self.SEQ_ORD

    @property
    def method(self):
        return self.HTTP_MTHD

    @property
    def path(self):
        return self.API_PATH

    @property
    def operation_id(self):
        return self.OPER_ID

    @property
    def summary(self):
        return self.SMRY

    @property
    def description(self):
        return self.ENDPT_DESC

    @property
    def tags(self):
        return self.TAGS

    @property
    def target_url(self):
        return self.TRGT_URL

    @property
    def headers(self):
        return self.HDR_PARAMS

    @property
    def query_params(self):
        return self.QRY_PARAMS

    @property
    def path_params(self):
        return self.PATH_PARAMS

    @property
    def request_body(self):
        return self.REQ_BODY

    @property
    def responses(self):
        return self.RESPS

    @property
    def security(self):
        return self.SCRTY

    @property
    def x_extensions(self):
        return self.X_EXTS

    @property
    def authentication(self):
        return self.AUTHN

    @property
    def rate_limiting(self):
        return self.RATE_LMT

    @property
    def cache_config(self):
        return self.CACHE_CFG

    @property
    def cors_config(self):
        return self.CORS_CFG

    @property
    def integration_type(self):
        return self.INTG_TYPE

    @property
    def integration_config(self):
        return self.INTG_CFG

    @property
    def is_deleted(self):
        return self.DEL_YN == 'Y'

    @property
    def created_at(self):
        return self.CREA_DT

    @property
    def updated_at(self):
        return self.UPDT_DT

    def __repr__(self):
        return f"<GatewayEndpoint(id={self.ENDPT_ID}, method='{self.HTTP_MTHD}', path='{self.API_PATH}', seq={self.SEQ_ORD})>"


# 스키마 필드명 → 컬럼명 매핑 (생성/수정 시 사용)
ENDPOINT_FIELD_COLUMNS = {
    "method": "HTTP_MTHD",
    "path": "API_PATH",
    "operation_id": "OPER_ID",
    "summary": "SMRY",
    "description": "ENDPT_DESC",
    "tags": "TAGS",
    "target_url": "TRGT_URL",
    "headers": "HDR_PARAMS",
    "query_params": "QRY_PARAMS",
    "path_params": "PATH_PARAMS",
    "request_body": "REQ_BODY",
    "responses": "RESPS",
    "security": "SCRTY",
    "authentication": "AUTHN",
    "rate_limiting": "RATE_LMT",
    "cache_config": "CACHE_CFG",
    "cors_config": "CORS_CFG",
    "integration_type": "INTG_TYPE",
    "integration_config": "INTG_CFG",
    "x_extensions": "X_EXTS",
}
