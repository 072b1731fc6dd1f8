"""
OpenAPI 문서 조립기

게이트웨이 설정과 정렬된 엔드포인트 목록으로 OpenAPI 문서 트리를 만들고
JSON/YAML로 직렬화합니다. 조립 함수는 DB에 접근하지 않는 순수 함수입니다.
"""
import json
from typing import Any, Iterable

import yaml

from app.core.exceptions import SerializationError
from app.models.gateway_config import GatewayConfig, DEFAULT_OPENAPI_VERSION
from app.models.gateway_endpoint import GatewayEndpoint

# 문서 루트로 올리는 메타데이터 키 (출력 순서)
ROOT_METADATA_KEYS = ("servers", "security", "tags", "externalDocs", "components")

# 파라미터 위치별 엔드포인트 컬럼 (출력 순서: path → query → header)
PARAMETER_LOCATIONS = (
    ("path", "PATH_PARAMS"),
    ("query", "QRY_PARAMS"),
    ("header", "HDR_PARAMS"),
)

DEFAULT_RESPONSES = {"200": {"description": "Successful response"}}

MEDIA_TYPES = {
    "json": "application/json",
    "yaml": "application/x-yaml",
}


class _NoAliasDumper(yaml.SafeDumper):
    """앵커/별칭(&id001, *id001) 없이 덤프"""

    def ignore_aliases(self, data):
        return True


def build_parameters(endpoint: GatewayEndpoint) -> list[dict[str, Any]]:
    """경로 → 쿼리 → 헤더 순서로 parameters 배열 생성"""
    parameters = []
    for location, column in PARAMETER_LOCATIONS:
        params = getattr(endpoint, column) or {}
        for name, definition in params.items():
            parameters.append({"name": name, "in": location, **(definition or {})})
    return parameters


def build_operation(endpoint: GatewayEndpoint) -> dict[str, Any]:
    """엔드포인트 하나를 operation 객체로 변환"""
    operation: dict[str, Any] = {}

    if endpoint.OPER_ID:
        operation["operationId"] = endpoint.OPER_ID
    if endpoint.SMRY:
        operation["summary"] = endpoint.SMRY
    if endpoint.ENDPT_DESC:
        operation["description"] = endpoint.ENDPT_DESC
    if endpoint.TAGS:
        operation["tags"] = list(endpoint.TAGS)

    parameters = build_parameters(endpoint)
    if parameters:
        operation["parameters"] = parameters

    if endpoint.REQ_BODY:
        operation["requestBody"] = endpoint.REQ_BODY
    operation["responses"] = endpoint.RESPS or dict(DEFAULT_RESPONSES)
    if endpoint.SCRTY is not None:
        operation["security"] = endpoint.SCRTY

    # 벤더 확장은 마지막에 병합 (충돌 시 확장 키 우선)
    if endpoint.X_EXTS:
        operation.update(endpoint.X_EXTS)

    return operation


def assemble_document(
    config: GatewayConfig,
    endpoints: Iterable[GatewayEndpoint],
) -> dict[str, Any]:
    """
    설정 + 엔드포인트 → OpenAPI 문서 트리

    엔드포인트는 SEQ_ORD 오름차순으로 처리하며, 같은 경로의 operation은
    처음 등장한 경로 항목 아래에 소문자 메서드 키로 추가됩니다.
    입력이 같으면 항상 같은 구조(키 삽입 순서 포함)를 반환합니다.
    """
    info: dict[str, Any] = {
        "title": config.CFG_NAME,
        "version": config.CFG_VER,
    }
    if config.CFG_DESC:
        info["description"] = config.CFG_DESC

    document: dict[str, Any] = {
        "openapi": config.OAS_VER or DEFAULT_OPENAPI_VERSION,
        "info": info,
        "paths": {},
    }

    ordered = sorted(endpoints, key=lambda e: e.SEQ_ORD)
    for endpoint in ordered:
        path_item = document["paths"].setdefault(endpoint.API_PATH, {})
        path_item[endpoint.HTTP_MTHD.lower()] = build_operation(endpoint)

    metadata = config.META_DATA or {}
    for key in ROOT_METADATA_KEYS:
        if metadata.get(key) is not None:
            document[key] = metadata[key]

    return document


def serialize_document(document: dict[str, Any], fmt: str) -> bytes:
    """
    문서 직렬화

    - json: 2칸 들여쓰기, 비ASCII 유지
    - yaml: 키 삽입 순서 유지, 줄 길이 무제한, 앵커/별칭 없음

    Raises:
        SerializationError: 지원하지 않는 형식이거나 직렬화에 실패한 경우
    """
    try:
        if fmt == "json":
            text = json.dumps(document, indent=2, ensure_ascii=False)
        elif fmt == "yaml":
            text = yaml.dump(
                document,
                Dumper=_NoAliasDumper,
                sort_keys=False,
                allow_unicode=True,
                default_flow_style=False,
                width=float("inf"),
            )
        else:
            raise SerializationError(f"지원하지 않는 Export 형식입니다: {fmt}")
    except (TypeError, ValueError, yaml.YAMLError) as e:
        raise SerializationError(
            f"문서 직렬화 실패 ({fmt}): {str(e)}",
            details={"format": fmt},
        ) from e

    return text.encode("utf-8")
