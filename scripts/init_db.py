"""
데이터베이스 초기화 스크립트

테이블을 생성하고, 옵션으로 샘플 게이트웨이 설정(Pet Store)을 추가합니다.

사용법:
    python scripts/init_db.py            # 테이블만 생성
    python scripts/init_db.py --sample   # 샘플 설정 포함
"""
import argparse
import asyncio
import sys
import os

# 프로젝트 루트를 path에 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.database import async_session_maker, init_db
from app.core.exceptions import DuplicateError
from app.schemas import GatewayConfigCreate, EndpointCreate
from app.services import GatewayConfigService, EndpointService


SAMPLE_ENDPOINTS = [
    EndpointCreate(
        method="GET",
        path="/pets",
        operation_id="listPets",
        summary="List all pets",
        tags=["pets"],
        query_params={"limit": {"description": "How many items to return", "schema": {"type": "integer"}}},
        responses={"200": {"description": "A paged array of pets"}},
    ),
    EndpointCreate(
        method="POST",
        path="/pets",
        operation_id="createPet",
        summary="Create a pet",
        tags=["pets"],
        responses={"201": {"description": "Null response"}},
    ),
    EndpointCreate(
        method="GET",
        path="/pets/{petId}",
        operation_id="showPetById",
        summary="Info for a specific pet",
        tags=["pets"],
        path_params={"petId": {"required": True, "description": "The id of the pet to retrieve", "schema": {"type": "string"}}},
        responses={"200": {"description": "Expected response to a valid request"}},
    ),
]


async def create_sample_config():
    """샘플 설정 생성"""
    print("📝 샘플 설정 생성 중...")

    async with async_session_maker() as db:
        try:
            config = await GatewayConfigService.create(
                db,
                GatewayConfigCreate(
                    name="Pet Store",
                    version="1.0.0",
                    description="Sample gateway configuration",
                    metadata={"servers": [{"url": "http://petstore.swagger.io/v1"}]},
                ),
            )
        except DuplicateError:
            print("ℹ️ 샘플 설정이 이미 존재합니다.")
            return

        for endpoint in SAMPLE_ENDPOINTS:
            await EndpointService.create(db, config.CFG_ID, endpoint)
        await GatewayConfigService.activate(db, config.CFG_ID)
        await db.commit()

    print(f"✅ 샘플 설정 생성 완료: {config.CFG_ID}")


async def main(sample: bool):
    print("📦 테이블 생성 중...")
    await init_db()
    print("✅ 테이블 생성 완료")

    if sample:
        await create_sample_config()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="데이터베이스 초기화")
    parser.add_argument("--sample", action="store_true", help="샘플 게이트웨이 설정 추가")
    args = parser.parse_args()
    asyncio.run(main(args.sample))
