import pytest

from app.core.exceptions import DuplicateError, NotFoundError
from app.schemas import EndpointUpdate
from app.services import EndpointService


async def test_create_assigns_sequence_and_fields(pet_store, make_endpoint):
    endpoint = await make_endpoint(
        pet_store.CFG_ID,
        "get",
        "/pets",
        operation_id="listPets",
        tags=["pets"],
        query_params={"limit": {"schema": {"type": "integer"}}},
        integration_type="HTTP",
    )

    assert endpoint.HTTP_MTHD == "GET"
    assert endpoint.SEQ_ORD == 10
    assert endpoint.OPER_ID == "listPets"
    assert endpoint.TAGS == ["pets"]
    assert endpoint.QRY_PARAMS == {"limit": {"schema": {"type": "integer"}}}
    assert endpoint.INTG_TYPE == "HTTP"


async def test_create_in_missing_config(make_endpoint):
    with pytest.raises(NotFoundError):
        await make_endpoint("missing", "GET", "/pets")


async def test_duplicate_method_and_path_conflicts(pet_store, make_endpoint):
    await make_endpoint(pet_store.CFG_ID, "GET", "/pets")

    with pytest.raises(DuplicateError) as exc_info:
        await make_endpoint(pet_store.CFG_ID, "GET", "/pets")
    assert exc_info.value.status_code == 409


async def test_same_path_different_method_is_allowed(pet_store, make_endpoint):
    await make_endpoint(pet_store.CFG_ID, "GET", "/pets")
    endpoint = await make_endpoint(pet_store.CFG_ID, "POST", "/pets")
    assert endpoint.SEQ_ORD == 20


async def test_update_path_collision_conflicts(db, pet_store, make_endpoint):
    await make_endpoint(pet_store.CFG_ID, "GET", "/pets")
    other = await make_endpoint(pet_store.CFG_ID, "GET", "/owners")

    with pytest.raises(DuplicateError):
        await EndpointService.update(db, pet_store.CFG_ID, other.ENDPT_ID, EndpointUpdate(path="/pets"))


async def test_update_collision_with_soft_deleted_succeeds(db, pet_store, make_endpoint):
    deleted = await make_endpoint(pet_store.CFG_ID, "GET", "/pets")
    other = await make_endpoint(pet_store.CFG_ID, "GET", "/owners")
    await EndpointService.remove(db, pet_store.CFG_ID, deleted.ENDPT_ID)

    updated = await EndpointService.update(
        db, pet_store.CFG_ID, other.ENDPT_ID, EndpointUpdate(path="/pets")
    )
    assert updated.API_PATH == "/pets"


async def test_update_same_method_and_path_on_self(db, pet_store, make_endpoint):
    endpoint = await make_endpoint(pet_store.CFG_ID, "GET", "/pets")

    updated = await EndpointService.update(
        db, pet_store.CFG_ID, endpoint.ENDPT_ID, EndpointUpdate(method="get", path="/pets", summary="List")
    )
    assert updated.HTTP_MTHD == "GET"
    assert updated.SMRY == "List"


async def test_update_missing_endpoint(db, pet_store):
    with pytest.raises(NotFoundError):
        await EndpointService.update(db, pet_store.CFG_ID, "missing", EndpointUpdate(summary="x"))


async def test_remove_hides_endpoint(db, pet_store, make_endpoint):
    endpoint = await make_endpoint(pet_store.CFG_ID, "GET", "/pets")
    await EndpointService.remove(db, pet_store.CFG_ID, endpoint.ENDPT_ID)

    assert endpoint.DEL_YN == 'Y'
    assert await EndpointService.list_endpoints(db, pet_store.CFG_ID) == []
    with pytest.raises(NotFoundError):
        await EndpointService.get_by_id(db, pet_store.CFG_ID, endpoint.ENDPT_ID)


async def test_get_by_id_scoped_to_config(db, pet_store, make_endpoint):
    endpoint = await make_endpoint(pet_store.CFG_ID, "GET", "/pets")

    with pytest.raises(NotFoundError):
        await EndpointService.get_by_id(db, "other-config", endpoint.ENDPT_ID)


async def test_list_endpoints_missing_config(db):
    with pytest.raises(NotFoundError):
        await EndpointService.list_endpoints(db, "missing")
