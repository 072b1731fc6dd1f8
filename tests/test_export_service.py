import json
from datetime import timedelta

import pytest
import yaml
from sqlalchemy import select

from app.core.config import get_settings
from app.core.database import utcnow
from app.core.exceptions import NotFoundError, ValidationError
from app.models import ExportCache
from app.services import ExportService, GatewayConfigService
from app.services.export_service import export_filename


async def cache_entries(db, config_id):
    result = await db.execute(select(ExportCache).where(ExportCache.CFG_ID == config_id))
    return list(result.scalars().all())


async def test_first_export_is_miss_and_stored(db, pet_store, make_endpoint):
    await make_endpoint(pet_store.CFG_ID, "GET", "/pets", operation_id="listPets")

    content = await ExportService.export_config(db, pet_store.CFG_ID, "yaml")

    document = yaml.safe_load(content)
    assert document["info"]["title"] == "Pet Store"
    assert document["paths"]["/pets"]["get"]["operationId"] == "listPets"

    entries = await cache_entries(db, pet_store.CFG_ID)
    assert len(entries) == 1
    entry = entries[0]
    assert entry.FILE_FMT == "yaml"
    assert entry.FILE_SIZE == len(content)
    assert entry.ACCS_CNT == 0
    assert entry.EXPR_DT - entry.GNRT_DT == timedelta(seconds=get_settings().cache_ttl)


async def test_second_export_is_hit(db, pet_store, make_endpoint):
    await make_endpoint(pet_store.CFG_ID, "GET", "/pets")

    first = await ExportService.export_config(db, pet_store.CFG_ID, "yaml")
    second = await ExportService.export_config(db, pet_store.CFG_ID, "yaml")

    assert first == second
    entries = await cache_entries(db, pet_store.CFG_ID)
    assert len(entries) == 1
    assert entries[0].ACCS_CNT == 1
    assert entries[0].LAST_ACCS_DT is not None


async def test_cached_content_served_until_expiry(db, pet_store, make_endpoint):
    first = await ExportService.export_config(db, pet_store.CFG_ID, "json")
    await make_endpoint(pet_store.CFG_ID, "GET", "/pets")

    second = await ExportService.export_config(db, pet_store.CFG_ID, "json")

    assert second == first
    assert json.loads(second)["paths"] == {}


async def test_expired_entry_is_replaced(db, pet_store, make_endpoint):
    await ExportService.export_config(db, pet_store.CFG_ID, "yaml")
    old = (await cache_entries(db, pet_store.CFG_ID))[0]
    old_id = old.CACHE_ID
    old.GNRT_DT = utcnow() - timedelta(seconds=get_settings().cache_ttl + 1)
    await db.flush()
    await make_endpoint(pet_store.CFG_ID, "GET", "/pets")

    content = await ExportService.export_config(db, pet_store.CFG_ID, "yaml")

    assert "/pets" in yaml.safe_load(content)["paths"]
    entries = await cache_entries(db, pet_store.CFG_ID)
    assert len(entries) == 1
    assert entries[0].CACHE_ID != old_id
    assert entries[0].ACCS_CNT == 0


async def test_formats_are_cached_separately(db, pet_store):
    json_content = await ExportService.export_config(db, pet_store.CFG_ID, "json")
    yaml_content = await ExportService.export_config(db, pet_store.CFG_ID, "yaml")

    assert json.loads(json_content) == yaml.safe_load(yaml_content)
    assert json_content.decode("utf-8").startswith('{\n  "openapi"')


async def test_export_status(db, pet_store):
    status = await ExportService.get_export_status(db, pet_store.CFG_ID)
    assert status.cached is False
    assert status.formats == []

    await ExportService.export_config(db, pet_store.CFG_ID, "yaml")
    await ExportService.export_config(db, pet_store.CFG_ID, "json")

    status = await ExportService.get_export_status(db, pet_store.CFG_ID)
    assert status.cached is True
    assert status.formats == ["json", "yaml"]


async def test_export_status_excludes_expired(db, pet_store):
    await ExportService.export_config(db, pet_store.CFG_ID, "json")
    entry = (await cache_entries(db, pet_store.CFG_ID))[0]
    entry.GNRT_DT = utcnow() - timedelta(seconds=get_settings().cache_ttl + 1)
    await db.flush()

    status = await ExportService.get_export_status(db, pet_store.CFG_ID)

    assert status.cached is False
    assert await cache_entries(db, pet_store.CFG_ID) == []


async def test_export_missing_or_deleted_config(db, pet_store):
    with pytest.raises(NotFoundError):
        await ExportService.export_config(db, "missing", "json")

    await GatewayConfigService.remove(db, pet_store.CFG_ID)
    with pytest.raises(NotFoundError):
        await ExportService.export_config(db, pet_store.CFG_ID, "json")
    with pytest.raises(NotFoundError):
        await ExportService.get_export_status(db, pet_store.CFG_ID)


async def test_export_unsupported_format(db, pet_store):
    with pytest.raises(ValidationError):
        await ExportService.export_config(db, pet_store.CFG_ID, "xml")


async def test_build_document_is_not_cached(db, pet_store):
    document = await ExportService.build_document(db, pet_store.CFG_ID)

    assert document["openapi"] == "3.0.0"
    assert await cache_entries(db, pet_store.CFG_ID) == []


def test_export_filename():
    assert export_filename("abc", "yaml") == "openapi-abc.yaml"
