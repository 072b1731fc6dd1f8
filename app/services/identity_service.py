"""
식별자 및 콘텐츠 해시 서비스

- generate_id: 행 기본 키 생성
- compute_hash: 문자열의 SHA-256 (64자 소문자 hex)
- canonical_json / hash_object: 키 순서와 무관한 구조 해시
"""
import hashlib
import json
import uuid
from typing import Any


def generate_id() -> str:
    """UUID 기반 ID 생성 (varchar(50))"""
    return str(uuid.uuid4())


def compute_hash(content: str) -> str:
    """UTF-8 인코딩 기준 SHA-256 hex digest"""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def canonical_json(obj: Any) -> str:
    """
    정규화된 JSON 문자열

    객체 키를 재귀적으로 정렬하고 공백 없는 구분자를 사용하므로
    키 순서만 다른 두 문서는 같은 문자열이 됩니다.
    배열 순서는 의미가 있으므로 유지합니다.
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


def hash_object(obj: Any) -> str:
    """구조 해시 (canonical_json의 SHA-256)"""
    return compute_hash(canonical_json(obj))
