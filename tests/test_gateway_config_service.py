import pytest

from app.core.exceptions import DuplicateError, NotFoundError
from app.schemas import GatewayConfigCreate, GatewayConfigUpdate
from app.services import GatewayConfigService
from app.services.identity_service import hash_object


async def test_create_sets_defaults_and_hash(db):
    config = await GatewayConfigService.create(
        db, GatewayConfigCreate(name="Pet Store", version="1.0.0")
    )

    assert config.OAS_VER == "3.0.0"
    assert config.ACTV_YN == 'N'
    assert config.DEL_YN == 'N'
    assert config.FILE_HASH == hash_object(GatewayConfigService.hashable_projection(config))


async def test_create_duplicate_payload_conflicts(db):
    payload = GatewayConfigCreate(name="Pet Store", version="1.0.0", metadata={"a": 1, "b": 2})
    await GatewayConfigService.create(db, payload)

    reordered = GatewayConfigCreate(name="Pet Store", version="1.0.0", metadata={"b": 2, "a": 1})
    with pytest.raises(DuplicateError) as exc_info:
        await GatewayConfigService.create(db, reordered)
    assert exc_info.value.status_code == 409


async def test_create_after_remove_is_allowed(db, pet_store):
    await GatewayConfigService.remove(db, pet_store.CFG_ID)

    config = await GatewayConfigService.create(
        db, GatewayConfigCreate(name="Pet Store", version="1.0.0")
    )
    assert config.CFG_ID != pet_store.CFG_ID


async def test_update_recomputes_hash_when_name_changes(db, pet_store):
    old_hash = pet_store.FILE_HASH

    updated = await GatewayConfigService.update(
        db, pet_store.CFG_ID, GatewayConfigUpdate(name="Pet Shop")
    )

    assert updated.CFG_NAME == "Pet Shop"
    assert updated.FILE_HASH != old_hash
    assert updated.FILE_HASH == hash_object(GatewayConfigService.hashable_projection(updated))


async def test_update_metadata_only_keeps_hash(db, pet_store):
    old_hash = pet_store.FILE_HASH

    updated = await GatewayConfigService.update(
        db, pet_store.CFG_ID, GatewayConfigUpdate(metadata={"servers": [{"url": "https://api.example.com"}]})
    )

    assert updated.META_DATA == {"servers": [{"url": "https://api.example.com"}]}
    assert updated.FILE_HASH == old_hash


async def test_update_to_existing_content_conflicts(db, pet_store):
    other = await GatewayConfigService.create(
        db, GatewayConfigCreate(name="Other", version="1.0.0")
    )

    with pytest.raises(DuplicateError):
        await GatewayConfigService.update(db, other.CFG_ID, GatewayConfigUpdate(name="Pet Store"))


async def test_update_ignores_null_required_fields(db, pet_store):
    updated = await GatewayConfigService.update(
        db, pet_store.CFG_ID, GatewayConfigUpdate(name=None, description="desc")
    )
    assert updated.CFG_NAME == "Pet Store"
    assert updated.CFG_DESC == "desc"


async def test_update_missing_config_not_found(db):
    with pytest.raises(NotFoundError):
        await GatewayConfigService.update(db, "missing", GatewayConfigUpdate(name="x"))


async def test_activate_keeps_single_active_config(db, pet_store):
    other = await GatewayConfigService.create(
        db, GatewayConfigCreate(name="Other", version="2.0.0")
    )

    await GatewayConfigService.activate(db, pet_store.CFG_ID)
    activated = await GatewayConfigService.activate(db, other.CFG_ID)
    assert activated.ACTV_YN == 'Y'

    first = await GatewayConfigService.get_by_id(db, pet_store.CFG_ID)
    await db.refresh(first)
    assert first.ACTV_YN == 'N'

    active = await GatewayConfigService.get_active(db)
    assert active.CFG_ID == other.CFG_ID


async def test_deactivate_only_target(db, pet_store):
    await GatewayConfigService.activate(db, pet_store.CFG_ID)
    config = await GatewayConfigService.deactivate(db, pet_store.CFG_ID)

    assert config.ACTV_YN == 'N'
    assert await GatewayConfigService.get_active(db) is None


async def test_remove_is_soft_delete(db, pet_store):
    await GatewayConfigService.activate(db, pet_store.CFG_ID)
    await GatewayConfigService.remove(db, pet_store.CFG_ID)

    assert await GatewayConfigService.get_by_id(db, pet_store.CFG_ID) is None
    deleted = await GatewayConfigService.get_by_id(db, pet_store.CFG_ID, include_deleted=True)
    assert deleted.DEL_YN == 'Y'
    assert deleted.DEL_DT is not None
    assert deleted.ACTV_YN == 'N'

    with pytest.raises(NotFoundError):
        await GatewayConfigService.remove(db, pet_store.CFG_ID)


async def test_list_configs_paginates(db):
    for i in range(5):
        await GatewayConfigService.create(db, GatewayConfigCreate(name=f"API {i}", version="1.0.0"))

    configs, total = await GatewayConfigService.list_configs(db, page=2, limit=2)

    assert total == 5
    assert len(configs) == 2


async def test_get_with_endpoints_sorted_by_sequence(db, pet_store, make_endpoint):
    first = await make_endpoint(pet_store.CFG_ID, "GET", "/pets")
    second = await make_endpoint(pet_store.CFG_ID, "POST", "/pets")
    first.SEQ_ORD = 30
    await db.flush()

    config, endpoints = await GatewayConfigService.get_with_endpoints(db, pet_store.CFG_ID)

    assert config.CFG_ID == pet_store.CFG_ID
    assert [e.ENDPT_ID for e in endpoints] == [second.ENDPT_ID, first.ENDPT_ID]


async def test_get_with_endpoints_missing(db):
    with pytest.raises(NotFoundError):
        await GatewayConfigService.get_with_endpoints(db, "missing")
