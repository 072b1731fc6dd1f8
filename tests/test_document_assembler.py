import json

import pytest
import yaml

from app.core.exceptions import SerializationError
from app.models import GatewayConfig, GatewayEndpoint
from app.services.document_assembler import assemble_document, build_operation, serialize_document


def make_config(**overrides):
    values = dict(
        CFG_ID="cfg-1",
        CFG_NAME="Pet Store",
        CFG_VER="1.0.0",
        CFG_DESC=None,
        OAS_VER="3.0.3",
        META_DATA=None,
    )
    values.update(overrides)
    return GatewayConfig(**values)


def make_endpoint(seq, method, path, **overrides):
    return GatewayEndpoint(
        ENDPT_ID=f"{method}-{path}",
        CFG_ID="cfg-1",
        SEQ_ORD=seq,
        HTTP_MTHD=method,
        API_PATH=path,
        **overrides,
    )


def test_document_root_and_info():
    document = assemble_document(make_config(CFG_DESC="Pets API"), [])

    assert document["openapi"] == "3.0.3"
    assert document["info"] == {"title": "Pet Store", "version": "1.0.0", "description": "Pets API"}
    assert document["paths"] == {}


def test_description_omitted_when_empty():
    document = assemble_document(make_config(), [])
    assert "description" not in document["info"]


def test_default_openapi_version():
    document = assemble_document(make_config(OAS_VER=None), [])
    assert document["openapi"] == "3.0.0"


def test_paths_follow_sequence_order():
    endpoints = [
        make_endpoint(30, "GET", "/owners"),
        make_endpoint(10, "POST", "/pets"),
        make_endpoint(20, "GET", "/pets"),
    ]

    document = assemble_document(make_config(), endpoints)

    assert list(document["paths"]) == ["/pets", "/owners"]
    assert list(document["paths"]["/pets"]) == ["post", "get"]


def test_parameters_order_path_query_header():
    endpoint = make_endpoint(
        10,
        "GET",
        "/pets/{petId}",
        HDR_PARAMS={"X-Trace": {"schema": {"type": "string"}}},
        QRY_PARAMS={"limit": {"schema": {"type": "integer"}}},
        PATH_PARAMS={"petId": {"required": True, "schema": {"type": "string"}}},
    )

    parameters = build_operation(endpoint)["parameters"]

    assert [(p["name"], p["in"]) for p in parameters] == [
        ("petId", "path"),
        ("limit", "query"),
        ("X-Trace", "header"),
    ]
    assert parameters[0] == {"name": "petId", "in": "path", "required": True, "schema": {"type": "string"}}


def test_operation_defaults_and_omitted_keys():
    operation = build_operation(make_endpoint(10, "GET", "/pets"))

    assert operation == {"responses": {"200": {"description": "Successful response"}}}


def test_operation_copies_fragments_and_merges_extensions():
    endpoint = make_endpoint(
        10,
        "POST",
        "/pets",
        OPER_ID="createPet",
        SMRY="Create a pet",
        ENDPT_DESC="Creates a new pet",
        TAGS=["pets"],
        REQ_BODY={"content": {"application/json": {"schema": {"type": "object"}}}},
        RESPS={"201": {"description": "Created"}},
        SCRTY=[{"api_key": []}],
        X_EXTS={"x-rate-limit": 100, "summary": "overridden"},
    )

    operation = build_operation(endpoint)

    assert operation["operationId"] == "createPet"
    assert operation["description"] == "Creates a new pet"
    assert operation["tags"] == ["pets"]
    assert operation["requestBody"]["content"]["application/json"]["schema"] == {"type": "object"}
    assert operation["responses"] == {"201": {"description": "Created"}}
    assert operation["security"] == [{"api_key": []}]
    assert operation["x-rate-limit"] == 100
    assert operation["summary"] == "overridden"


def test_root_metadata_attached_independently():
    config = make_config(META_DATA={
        "servers": [{"url": "https://api.example.com"}],
        "tags": [{"name": "pets"}],
        "unrelated": True,
    })

    document = assemble_document(config, [])

    assert document["servers"] == [{"url": "https://api.example.com"}]
    assert document["tags"] == [{"name": "pets"}]
    assert "security" not in document
    assert "externalDocs" not in document
    assert "unrelated" not in document


def test_assemble_is_deterministic():
    config = make_config(META_DATA={"servers": [{"url": "/"}]})
    endpoints = [make_endpoint(10, "GET", "/pets"), make_endpoint(20, "POST", "/pets")]

    first = serialize_document(assemble_document(config, endpoints), "json")
    second = serialize_document(assemble_document(config, endpoints), "json")
    assert first == second


def test_serialize_json_two_space_indent():
    content = serialize_document({"openapi": "3.0.0", "info": {"title": "펫"}}, "json")

    assert content.decode("utf-8").startswith('{\n  "openapi": "3.0.0"')
    assert json.loads(content) == {"openapi": "3.0.0", "info": {"title": "펫"}}


def test_serialize_yaml_keeps_order_and_no_aliases():
    shared = {"description": "ok"}
    document = {
        "openapi": "3.0.0",
        "info": {"title": "Pet Store", "version": "1.0.0"},
        "paths": {"/a": {"get": {"responses": {"200": shared}}}, "/b": {"get": {"responses": {"200": shared}}}},
    }

    text = serialize_document(document, "yaml").decode("utf-8")

    assert text.index("openapi") < text.index("info") < text.index("paths")
    assert "&id" not in text
    assert "*id" not in text
    assert yaml.safe_load(text) == document


def test_serialize_yaml_long_lines_not_wrapped():
    description = "word " * 100
    text = serialize_document({"description": description.strip()}, "yaml").decode("utf-8")
    assert len(text.strip().splitlines()) == 1


def test_serialize_unknown_format():
    with pytest.raises(SerializationError):
        serialize_document({}, "xml")
