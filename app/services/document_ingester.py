"""
OpenAPI 문서 수집기

업로드된 파일(JSON/YAML 또는 이를 담은 ZIP)을 파싱, 검증하고
게이트웨이 설정 필드와 엔드포인트 필드 목록으로 분해합니다.
DB에 접근하지 않는 순수 함수 모음이며, 저장은 ImportService가 담당합니다.

⚠️ 모든 사용자 입력 오류는 ValidationError(400)로 변환됩니다.
"""
import io
import json
import zipfile
from datetime import date, datetime
from typing import Any, Iterator, Optional

import yaml
from openapi_spec_validator import validate as validate_openapi

from app.core.exceptions import ValidationError
from app.core.logging import get_logger
from app.models.gateway_config import DEFAULT_OPENAPI_VERSION
from app.models.gateway_endpoint import HTTP_METHODS
from app.services.document_assembler import ROOT_METADATA_KEYS

logger = get_logger("ingester")

ZIP_MIME_TYPES = ("application/zip", "application/x-zip-compressed")
YAML_EXTENSIONS = (".yaml", ".yml")
JSON_EXTENSIONS = (".json",)
ZIP_NAME_HINTS = ("openapi", "swagger")

# parameters 위치 → 엔드포인트 필드
PARAMETER_FIELDS = {
    "path": "path_params",
    "query": "query_params",
    "header": "headers",
}

DEFAULT_TITLE = "Imported API"
DEFAULT_VERSION = "1.0.0"


def detect_format(filename: str, mime_type: Optional[str] = None) -> str:
    """
    업로드 파일 형식 판별

    Returns:
        "zip" | "yaml" | "json"

    Raises:
        ValidationError: 지원하지 않는 형식
    """
    name = (filename or "").lower()
    if mime_type in ZIP_MIME_TYPES or name.endswith(".zip"):
        return "zip"
    if name.endswith(YAML_EXTENSIONS):
        return "yaml"
    if name.endswith(JSON_EXTENSIONS):
        return "json"
    raise ValidationError(
        f"지원하지 않는 파일 형식입니다: {filename}",
        field="file",
        details={"supported": ["zip", "yaml", "yml", "json"]},
    )


def decode_text(content: bytes) -> str:
    """UTF-8 디코딩 (BOM 허용)"""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError(f"UTF-8 텍스트 파일이 아닙니다: {str(e)}", field="file") from e


def extract_from_zip(content: bytes) -> tuple[str, str, str]:
    """
    ZIP 아카이브에서 첫 번째 OpenAPI 후보 파일 추출

    후보: 이름이 yaml/yml/json으로 끝나거나 "openapi"/"swagger"를 포함하는 파일
    (디렉터리와 __MACOSX/ 항목은 제외)

    Returns:
        (항목 이름, 텍스트, 파싱 형식)
    """
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as archive:
            for info in archive.infolist():
                entry_name = info.filename
                lowered = entry_name.lower()
                if info.is_dir() or lowered.startswith("__macosx/"):
                    continue

                if lowered.endswith(JSON_EXTENSIONS):
                    fmt = "json"
                elif lowered.endswith(YAML_EXTENSIONS):
                    fmt = "yaml"
                elif any(hint in lowered for hint in ZIP_NAME_HINTS):
                    # 확장자 없이 이름만 일치하면 YAML(JSON 상위 집합)로 파싱
                    fmt = "yaml"
                else:
                    continue

                logger.debug(f"ZIP 항목 선택: {entry_name}")
                return entry_name, decode_text(archive.read(info)), fmt
    except zipfile.BadZipFile as e:
        raise ValidationError(f"손상된 ZIP 파일입니다: {str(e)}", field="file") from e

    raise ValidationError("ZIP 파일에서 OpenAPI 명세를 찾을 수 없습니다.", field="file")


def normalize(value: Any) -> Any:
    """
    JSON으로 표현 가능한 형태로 정규화

    YAML 파서는 따옴표 없는 `200:`을 정수 키로, 날짜를 date 객체로 읽으므로
    키는 문자열로, 날짜/시각은 ISO 문자열로 변환합니다.
    """
    if isinstance(value, dict):
        return {str(key): normalize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [normalize(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def parse_document(text: str, fmt: str) -> Any:
    """텍스트를 형식에 맞게 파싱"""
    try:
        if fmt == "json":
            return json.loads(text)
        return normalize(yaml.safe_load(text))
    except json.JSONDecodeError as e:
        raise ValidationError(f"JSON 파싱 실패: {str(e)}", field="file") from e
    except yaml.YAMLError as e:
        raise ValidationError(f"YAML 파싱 실패: {str(e)}", field="file") from e


def load_document(content: bytes, filename: str, mime_type: Optional[str] = None) -> Any:
    """업로드 바이트 → 파싱된 문서 (검증 전)"""
    fmt = detect_format(filename, mime_type)
    if fmt == "zip":
        _, text, fmt = extract_from_zip(content)
    else:
        text = decode_text(content)
    return parse_document(text, fmt)


def validate_document(document: Any) -> dict[str, Any]:
    """
    OpenAPI 3.x 구조 검증

    openapi-spec-validator로 내부 $ref 해석과 스키마 검사를 수행합니다.
    검증된 문서는 $ref를 그대로 유지한 채 반환합니다.
    """
    if not isinstance(document, dict):
        raise ValidationError("OpenAPI 문서의 최상위는 객체여야 합니다.")

    if "swagger" in document and "openapi" not in document:
        raise ValidationError("Swagger 2.0 문서는 지원하지 않습니다. OpenAPI 3.x로 변환 후 업로드하세요.")

    openapi_version = document.get("openapi")
    if not isinstance(openapi_version, str) or not openapi_version.startswith("3."):
        raise ValidationError(
            f"지원하지 않는 OpenAPI 버전입니다: {openapi_version}",
            field="openapi",
        )

    try:
        validate_openapi(document)
    except Exception as e:
        # 검증기 예외 계층(jsonschema, referencing)이 다양하므로 일괄 변환
        # jsonschema 오류의 str()은 인스턴스 전체를 덤프하므로 한 줄 message만 사용
        reason = getattr(e, "message", None) or str(e)
        raise ValidationError(f"유효하지 않은 OpenAPI 명세입니다: {reason}") from e

    return document


def build_config_fields(document: dict[str, Any]) -> dict[str, Any]:
    """문서 루트 → 게이트웨이 설정 필드"""
    info = document.get("info") or {}
    metadata = {
        key: document[key]
        for key in ROOT_METADATA_KEYS
        if document.get(key) is not None
    }
    return {
        "name": info.get("title") or DEFAULT_TITLE,
        "version": str(info.get("version") or DEFAULT_VERSION),
        "description": info.get("description"),
        "openapi_version": document.get("openapi") or DEFAULT_OPENAPI_VERSION,
        "metadata": metadata or None,
    }


def resolve_ref(document: dict[str, Any], node: Any) -> Any:
    """문서 내부 $ref(#/...)를 JSON 포인터로 해석"""
    if not isinstance(node, dict) or "$ref" not in node:
        return node

    ref = node["$ref"]
    if not isinstance(ref, str) or not ref.startswith("#/"):
        raise ValidationError(f"외부 참조는 지원하지 않습니다: {ref}")

    target: Any = document
    for token in ref[2:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if not isinstance(target, dict) or token not in target:
            raise ValidationError(f"참조를 해석할 수 없습니다: {ref}")
        target = target[token]
    return resolve_ref(document, target)


def extract_parameters(
    parameters: Optional[list],
    document: Optional[dict[str, Any]] = None,
) -> dict[str, Optional[dict[str, Any]]]:
    """
    parameters 배열 → 위치별 이름 키 맵

    각 정의에서 `in`, `name` 키를 제외한 나머지(description, required,
    schema, example 등)를 유지합니다. 위치별 항목이 없으면 None.
    cookie 파라미터는 대응 필드가 없어 제외합니다.
    """
    result: dict[str, Optional[dict[str, Any]]] = {field: None for field in PARAMETER_FIELDS.values()}

    for param in parameters or []:
        if document is not None:
            param = resolve_ref(document, param)
        location = param.get("in")
        field = PARAMETER_FIELDS.get(location)
        if not field:
            logger.debug(f"지원하지 않는 파라미터 위치 제외: {location} {param.get('name')}")
            continue
        definition = {key: value for key, value in param.items() if key not in ("in", "name")}
        if result[field] is None:
            result[field] = {}
        result[field][param["name"]] = definition

    return result


def merge_parameters(path_level: Optional[list], operation_level: Optional[list], document: dict[str, Any]) -> list:
    """경로 공통 파라미터 + operation 파라미터 (이름+위치가 같으면 operation 우선)"""
    merged: dict[tuple, dict[str, Any]] = {}
    for param in (path_level or []) + (operation_level or []):
        resolved = resolve_ref(document, param)
        merged[(resolved.get("name"), resolved.get("in"))] = resolved
    return list(merged.values())


def extract_extensions(operation: dict[str, Any]) -> Optional[dict[str, Any]]:
    """operation의 x-* 키 수집 (없으면 None)"""
    extensions = {key: value for key, value in operation.items() if str(key).startswith("x-")}
    return extensions or None


def iter_operations(document: dict[str, Any]) -> Iterator[tuple[str, str, dict[str, Any], dict[str, Any]]]:
    """문서 경로 순서 → 메서드 키 순서로 (경로, 메서드, operation, 경로 항목) 순회"""
    for path, path_item in (document.get("paths") or {}).items():
        if not isinstance(path_item, dict):
            continue
        for key, operation in path_item.items():
            method = str(key).upper()
            if method in HTTP_METHODS and isinstance(operation, dict):
                yield path, method, operation, path_item


def build_endpoint_fields(
    document: dict[str, Any],
    path: str,
    method: str,
    operation: dict[str, Any],
    path_item: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """operation 하나 → 엔드포인트 필드 (스키마 필드명 기준)"""
    parameters = merge_parameters(
        (path_item or {}).get("parameters"),
        operation.get("parameters"),
        document,
    )
    return {
        "method": method,
        "path": path,
        "operation_id": operation.get("operationId"),
        "summary": operation.get("summary"),
        "description": operation.get("description"),
        "tags": operation.get("tags"),
        "request_body": operation.get("requestBody"),
        "responses": operation.get("responses"),
        "security": operation.get("security"),
        **extract_parameters(parameters),
        "x_extensions": extract_extensions(operation),
    }


def decompose_document(document: dict[str, Any]) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """검증된 문서 → (설정 필드, 문서 순서의 엔드포인트 필드 목록)"""
    config_fields = build_config_fields(document)
    endpoint_fields = [
        build_endpoint_fields(document, path, method, operation, path_item)
        for path, method, operation, path_item in iter_operations(document)
    ]
    return config_fields, endpoint_fields
