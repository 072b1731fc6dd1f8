"""
Export 캐시 모델
설정별/포맷별 직렬화된 OpenAPI 문서를 캐싱합니다.

테이블명: APP_EXPRT_CACHE_H (히스토리 테이블)
네이밍 규칙: 기존 DB 패턴 준수
"""
from sqlalchemy import Column, String, Integer, BigInteger, DateTime, ForeignKey, LargeBinary, Index
from sqlalchemy.dialects import mysql
from app.core.database import Base, utcnow

# 지원하는 Export 포맷
EXPORT_FORMATS = ("json", "yaml")


class ExportCache(Base):
    """
    Export 캐시 테이블

    (CFG_ID, FILE_FMT) 기준으로 가장 최근에 생성된 행을 조회합니다.
    - GNRT_DT + TTL이 지나면 만료로 간주하고 조회 시점에 삭제합니다 (백그라운드 정리 없음).
    - ACCS_CNT / LAST_ACCS_DT: 캐시 적중 시 갱신
    """
    __tablename__ = "APP_EXPRT_CACHE_H"

    # Primary Key
    CACHE_ID = Column(String(50), primary_key=True, comment="캐시 고유 ID")

    # Foreign Key
    CFG_ID = Column(
        String(50),
        ForeignKey("APP_GTWY_CFG_L.CFG_ID", ondelete="CASCADE"),
        nullable=False,
    )

    # 파일 정보
    FILE_HASH = Column(String(64), nullable=False, comment="직렬화 결과 SHA-256 해시")
    FILE_FMT = Column(String(10), nullable=False, comment="파일 포맷: json, yaml")
    FILE_CNTNT = Column(
        LargeBinary().with_variant(mysql.LONGBLOB(), "mysql"),
        nullable=True,
        comment="직렬화된 문서 내용",
    )
    FILE_SIZE = Column(BigInteger, nullable=True, comment="파일 크기 (bytes)")

    # 만료 관리
    GNRT_DT = Column(DateTime, default=utcnow, nullable=False, comment="생성일시")
    EXPR_DT = Column(DateTime, nullable=True, comment="만료일시")

    # 접근 통계
    ACCS_CNT = Column(Integer, default=0, nullable=False, comment="캐시 적중 횟수")
    LAST_ACCS_DT = Column(DateTime, nullable=True, comment="마지막 접근일시")

    # Indexes
    __table_args__ = (
        Index("IDX_EXPRT_CACHE_CFG_FMT", "CFG_ID", "FILE_FMT"),
        Index("IDX_EXPRT_CACHE_HASH", "FILE_HASH"),
        Index("IDX_EXPRT_CACHE_EXPR_DT", "EXPR_DT"),
    )

    # Python 속성으로 접근 편의성 제공
    @property
    def id(self):
        return self.CACHE_ID

    @property
    def config_id(self):
        return self.CFG_ID

    @property
    def file_hash(self):
        return self.FILE_HASH

    @property
    def file_format(self):
        return self.FILE_FMT

    @property
    def content(self):
        return self.FILE_CNTNT

    @property
    def file_size(self):
        return self.FILE_SIZE

    @property
    def generated_at(self):
        return self.GNRT_DT

    @property
    def expires_at(self):
        return self.EXPR_DT

    @property
    def access_count(self):
        return self.ACCS_CNT

    @property
    def last_accessed_at(self):
        return self.LAST_ACCS_DT

    def __repr__(self):
        return f"<ExportCache(id={self.CACHE_ID}, config={self.CFG_ID}, format='{self.FILE_FMT}')>"
