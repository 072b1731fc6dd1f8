"""
테스트용 샘플 데이터 (API 키, OpenAPI 문서, ZIP 생성)
"""
import io
import zipfile

AUTH_HEADERS = {"X-API-Key": "test-api-key"}

PET_STORE_YAML = """
openapi: 3.0.3
info:
  title: Pet Store
  version: 1.0.0
  description: Pets API
servers:
  - url: https://petstore.example.com/v1
tags:
  - name: pets
paths:
  /pets:
    get:
      operationId: listPets
      tags: [pets]
      parameters:
        - name: limit
          in: query
          description: How many items to return
          schema:
            type: integer
        - name: X-Request-Id
          in: header
          schema:
            type: string
      responses:
        200:
          description: A paged array of pets
    post:
      operationId: createPet
      x-rate-limit: 10
      responses:
        '201':
          description: Null response
  /pets/{petId}:
    parameters:
      - name: petId
        in: path
        required: true
        schema:
          type: string
    get:
      operationId: showPetById
      responses:
        '200':
          description: Expected response to a valid request
"""


def make_zip(entries: dict) -> bytes:
    """{항목 이름: 내용} → ZIP 바이트"""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in entries.items():
            archive.writestr(name, content)
    return buffer.getvalue()
