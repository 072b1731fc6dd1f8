import json
from datetime import date

import pytest

from app.core.exceptions import ValidationError
from app.services.document_ingester import (
    build_config_fields,
    decompose_document,
    detect_format,
    extract_extensions,
    extract_from_zip,
    extract_parameters,
    load_document,
    normalize,
    validate_document,
)
from tests.samples import PET_STORE_YAML, make_zip


@pytest.mark.parametrize(
    "filename, mime_type, expected",
    [
        ("api.zip", None, "zip"),
        ("upload", "application/zip", "zip"),
        ("api.YAML", None, "yaml"),
        ("api.yml", "text/yaml", "yaml"),
        ("api.json", "application/json", "json"),
    ],
)
def test_detect_format(filename, mime_type, expected):
    assert detect_format(filename, mime_type) == expected


def test_detect_format_rejects_unknown():
    with pytest.raises(ValidationError) as exc_info:
        detect_format("api.txt", "text/plain")
    assert exc_info.value.status_code == 400


def test_extract_from_zip_picks_first_candidate():
    content = make_zip({
        "README.md": "ignored",
        "__MACOSX/docs/._openapi.yaml": "junk",
        "docs/openapi.yaml": PET_STORE_YAML,
        "other.json": "{}",
    })

    name, text, fmt = extract_from_zip(content)

    assert name == "docs/openapi.yaml"
    assert fmt == "yaml"
    assert "Pet Store" in text


def test_extract_from_zip_name_hint_without_extension():
    name, _, fmt = extract_from_zip(make_zip({"docs/swagger-definition": "openapi: 3.0.0"}))
    assert name == "docs/swagger-definition"
    assert fmt == "yaml"


def test_extract_from_zip_without_candidate():
    with pytest.raises(ValidationError):
        extract_from_zip(make_zip({"README.md": "nothing here"}))


def test_extract_from_corrupt_zip():
    with pytest.raises(ValidationError):
        extract_from_zip(b"not a zip")


def test_normalize_yaml_scalars():
    assert normalize({200: {"released": date(2024, 1, 2)}}) == {"200": {"released": "2024-01-02"}}


def test_load_document_yaml_and_json():
    document = load_document(PET_STORE_YAML.encode("utf-8"), "petstore.yaml")
    assert "200" in document["paths"]["/pets"]["get"]["responses"]

    as_json = json.dumps(document).encode("utf-8")
    assert load_document(as_json, "petstore.json") == document


def test_load_document_with_bom():
    content = "\ufeff" + json.dumps({"openapi": "3.0.0"})
    assert load_document(content.encode("utf-8"), "api.json") == {"openapi": "3.0.0"}


def test_load_document_invalid_json():
    with pytest.raises(ValidationError):
        load_document(b"{not json", "api.json")


def test_validate_document_accepts_valid_document():
    document = load_document(PET_STORE_YAML.encode("utf-8"), "petstore.yaml")
    assert validate_document(document) is document


@pytest.mark.parametrize(
    "document",
    [
        ["not", "an", "object"],
        {"swagger": "2.0", "info": {"title": "x", "version": "1"}, "paths": {}},
        {"openapi": "2.5", "info": {"title": "x", "version": "1"}, "paths": {}},
        {"openapi": "3.0.3", "paths": {}},
    ],
)
def test_validate_document_rejects_invalid(document):
    with pytest.raises(ValidationError):
        validate_document(document)


def test_build_config_fields_defaults():
    fields = build_config_fields({"openapi": "3.1.0", "info": {}})

    assert fields == {
        "name": "Imported API",
        "version": "1.0.0",
        "description": None,
        "openapi_version": "3.1.0",
        "metadata": None,
    }


def test_build_config_fields_lifts_metadata():
    document = load_document(PET_STORE_YAML.encode("utf-8"), "petstore.yaml")
    fields = build_config_fields(document)

    assert fields["name"] == "Pet Store"
    assert fields["version"] == "1.0.0"
    assert fields["description"] == "Pets API"
    assert fields["metadata"] == {
        "servers": [{"url": "https://petstore.example.com/v1"}],
        "tags": [{"name": "pets"}],
    }


def test_extract_parameters_splits_by_location():
    result = extract_parameters([
        {"name": "petId", "in": "path", "required": True, "schema": {"type": "string"}},
        {"name": "limit", "in": "query", "example": 10},
        {"name": "session", "in": "cookie"},
    ])

    assert result == {
        "path_params": {"petId": {"required": True, "schema": {"type": "string"}}},
        "query_params": {"limit": {"example": 10}},
        "headers": None,
    }


def test_extract_parameters_resolves_refs():
    document = {"components": {"parameters": {"Limit": {"name": "limit", "in": "query"}}}}
    result = extract_parameters([{"$ref": "#/components/parameters/Limit"}], document)
    assert result["query_params"] == {"limit": {}}


def test_extract_extensions():
    assert extract_extensions({"operationId": "x", "x-a": 1, "x-b": {"c": 2}}) == {"x-a": 1, "x-b": {"c": 2}}
    assert extract_extensions({"operationId": "x"}) is None


def test_decompose_document_iteration_order():
    document = validate_document(load_document(PET_STORE_YAML.encode("utf-8"), "petstore.yaml"))

    config_fields, endpoints = decompose_document(document)

    assert config_fields["name"] == "Pet Store"
    assert [(e["method"], e["path"]) for e in endpoints] == [
        ("GET", "/pets"),
        ("POST", "/pets"),
        ("GET", "/pets/{petId}"),
    ]
    list_pets, create_pet, show_pet = endpoints
    assert list_pets["query_params"] == {
        "limit": {"description": "How many items to return", "schema": {"type": "integer"}},
    }
    assert list_pets["headers"] == {"X-Request-Id": {"schema": {"type": "string"}}}
    assert list_pets["x_extensions"] is None
    assert create_pet["x_extensions"] == {"x-rate-limit": 10}
    # 경로 공통 파라미터 병합
    assert show_pet["path_params"] == {"petId": {"required": True, "schema": {"type": "string"}}}


def test_validate_document_reports_one_line_reason():
    document = load_document(PET_STORE_YAML.encode("utf-8"), "petstore.yaml")
    del document["info"]

    with pytest.raises(ValidationError) as exc_info:
        validate_document(document)

    message = exc_info.value.message
    assert "'info' is a required property" in message
    assert "Failed validating" not in message
    assert "On instance" not in message
    assert "\n" not in message
