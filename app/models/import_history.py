"""
Import 이력 모델
OpenAPI 파일 Import 시도와 결과를 기록합니다.

테이블명: APP_IMPRT_HIST_H (히스토리 테이블)
네이밍 규칙: 기존 DB 패턴 준수
"""
from enum import Enum
from sqlalchemy import Column, String, Integer, BigInteger, Text, DateTime, ForeignKey, Index
from app.core.database import Base, utcnow


class ImportStatus(str, Enum):
    """Import 처리 상태"""
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


class ImportHistory(Base):
    """
    Import 이력 테이블

    Import 시작 시 생성되고, 완료(성공/실패) 시 정확히 한 번 갱신됩니다.

    ⚠️ 이 테이블의 데이터는 절대 삭제하지 않습니다.
    설정이 물리 삭제되면 CFG_ID만 NULL로 바뀝니다.
    """
    __tablename__ = "APP_IMPRT_HIST_H"

    # Primary Key
    HIST_ID = Column(String(50), primary_key=True, comment="이력 고유 ID")

    # Foreign Key (설정 삭제 시 NULL)
    CFG_ID = Column(
        String(50),
        ForeignKey("APP_GTWY_CFG_L.CFG_ID", ondelete="SET NULL"),
        nullable=True,
    )

    # 업로드 파일 정보
    FILE_NAME = Column(String(255), nullable=False, comment="원본 파일명")
    FILE_SIZE = Column(BigInteger, nullable=True, comment="파일 크기 (bytes)")
    FILE_TYPE = Column(String(100), nullable=True, comment="MIME 타입")

    # 처리 결과
    IMPRT_STTS = Column(
        String(20),
        default=ImportStatus.PENDING.value,
        nullable=False,
        comment="처리 상태: pending, processing, success, failed",
    )
    ERR_DTL = Column(Text, nullable=True, comment="오류 상세")
    ENDPT_CNT = Column(Integer, nullable=True, comment="Import된 엔드포인트 수")
    PRCS_MS = Column(Integer, nullable=True, comment="처리 시간 (ms)")

    # 실행자 / 타임스탬프
    IMPRT_DT = Column(DateTime, default=utcnow, nullable=False, comment="Import 일시")
    IMPRT_BY = Column(String(255), nullable=True, comment="Import 실행자")

    # Indexes
    __table_args__ = (
        Index("IDX_IMPRT_HIST_CFG", "CFG_ID"),
        Index("IDX_IMPRT_HIST_STTS", "IMPRT_STTS"),
        Index("IDX_IMPRT_HIST_DT", "IMPRT_DT"),
    )

    # Python 속성으로 접근 편의성 제공
    @property
    def id(self):
        return self.HIST_ID

    @property
    def config_id(self):
        return self.CFG_ID

    @property
    def file_name(self):
        return self.FILE_NAME

    @property
    def file_size(self):
        return self.FILE_SIZE

    @property
    def file_type(self):
        return self.FILE_TYPE

    @property
    def status(self):
        return self.IMPRT_STTS

    @property
    def error_details(self):
        return self.ERR_DTL

    @property
    def endpoints_count(self):
        return self.ENDPT_CNT

    @property
    def processing_time_ms(self):
        return self.PRCS_MS

    @property
    def imported_at(self):
        return self.IMPRT_DT

    @property
    def imported_by(self):
        return self.IMPRT_BY

    def __repr__(self):
        return f"<ImportHistory(id={self.HIST_ID}, file='{self.FILE_NAME}', status='{self.IMPRT_STTS}')>"
