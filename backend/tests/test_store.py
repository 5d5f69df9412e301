"""
Record store behaviour, run against every backend.
"""
import dataclasses

import pytest

from cv_catalog.core.exceptions import DuplicateUserError
from cv_catalog.services.store import MemoryCvStore

pytestmark = pytest.mark.anyio


def cv_fields(**overrides):
    fields = {
        "name": "Maria",
        "age": 29,
        "nationality": "philippines",
        "experience": "2 years",
        "file_name": "maria.pdf",
        "file_type": "pdf",
        "file_content": "/srv/uploads/1_abc_maria.pdf",
    }
    fields.update(overrides)
    return fields


async def test_create_assigns_id_and_date(store):
    first = await store.create(cv_fields())
    second = await store.create(cv_fields(name="Amina"))

    assert isinstance(first.id, int)
    assert first.id != second.id
    assert first.upload_date is not None
    assert first.upload_date.tzinfo is not None
    assert (await store.get(first.id)) == first


async def test_list_all_newest_first(store):
    created = [await store.create(cv_fields(name=f"cv{i}")) for i in range(3)]

    listed = await store.list_all()
    assert [r.id for r in listed] == [r.id for r in reversed(created)]


async def test_list_limit(store):
    for i in range(4):
        await store.create(cv_fields(name=f"cv{i}"))

    assert len(await store.list_all(limit=2)) == 2
    store.default_limit = 3
    assert len(await store.list_all()) == 3
    store.default_limit = None
    assert len(await store.list_all()) == 4


async def test_list_by_nationality(store):
    await store.create(cv_fields(name="a", nationality="kenya"))
    await store.create(cv_fields(name="b", nationality="ethiopia"))
    await store.create(cv_fields(name="c", nationality="kenya"))

    kenya = await store.list_by_nationality("kenya")
    assert [r.name for r in kenya] == ["c", "a"]
    assert all(r.nationality == "kenya" for r in kenya)
    assert await store.list_by_nationality("nowhere") == []


async def test_count_by_nationality(store):
    await store.create(cv_fields(nationality="kenya"))
    await store.create(cv_fields(nationality="kenya"))
    await store.create(cv_fields(nationality="ethiopia"))

    assert await store.count_by_nationality() == {"kenya": 2, "ethiopia": 1}


async def test_get_missing_and_malformed(store):
    assert await store.get(9999) is None
    assert await store.get("not-an-id") is None
    assert await store.get("507f1f77bcf86cd799439011") is None


@pytest.mark.parametrize("bad_id", ["1_0", " 1", "+1", "1 ", "١", "0", "-1", 0, -1, 2 ** 63, "9" * 30])
async def test_loose_or_out_of_range_ids_are_not_found(store, bad_id):
    for i in range(10):
        await store.create(cv_fields(name=f"cv{i}"))

    assert await store.get(bad_id) is None
    assert await store.update(bad_id, {"name": "X"}) is None
    assert await store.delete(bad_id) is False
    assert len(await store.list_all()) == 10


async def test_get_accepts_string_id(store):
    record = await store.create(cv_fields())
    assert (await store.get(str(record.id))).id == record.id


async def test_update_changes_only_given_fields(store):
    record = await store.create(cv_fields())

    updated = await store.update(record.id, {"name": "X"})
    assert updated.name == "X"
    assert updated.age == record.age
    assert updated.nationality == record.nationality
    assert updated.experience == record.experience
    assert updated.file_name == record.file_name
    assert updated.file_type == record.file_type
    assert updated.file_content == record.file_content
    assert updated.upload_date == record.upload_date


async def test_update_ignores_immutable_fields(store):
    record = await store.create(cv_fields())

    updated = await store.update(record.id, {
        "age": 40,
        "file_type": "image",
        "file_content": "elsewhere",
        "id": 12345,
        "upload_date": None,
    })
    assert updated.id == record.id
    assert updated.age == 40
    assert updated.file_type == "pdf"
    assert updated.file_content == record.file_content


async def test_update_missing(store):
    assert await store.update(424242, {"name": "X"}) is None
    assert await store.update("bogus", {"name": "X"}) is None


async def test_delete(store):
    record = await store.create(cv_fields())

    assert await store.delete(record.id) is True
    assert await store.get(record.id) is None
    assert await store.delete(record.id) is False
    assert await store.delete("bogus") is False


async def test_clear(store):
    for i in range(3):
        await store.create(cv_fields(name=f"cv{i}"))

    assert await store.clear() == 3
    assert await store.list_all() == []


async def test_users(store):
    user = await store.create_user("admin", "hashed")

    assert (await store.get_user(user.id)).username == "admin"
    assert (await store.get_user_by_username("admin")).id == user.id
    assert await store.get_user_by_username("nobody") is None
    assert await store.get_user("x") is None
    with pytest.raises(DuplicateUserError):
        await store.create_user("admin", "other")


async def test_memory_stores_are_independent():
    first = MemoryCvStore()
    second = MemoryCvStore()
    a = await first.create(cv_fields())
    b = await second.create(cv_fields())

    assert a.id == b.id == 1
    assert len(await first.list_all()) == 1


async def test_returned_records_cannot_be_mutated(store):
    record = await store.create(cv_fields())
    listed = (await store.list_all())[0]

    with pytest.raises(dataclasses.FrozenInstanceError):
        listed.name = "changed behind the store's back"
    with pytest.raises(dataclasses.FrozenInstanceError):
        record.file_type = "image"

    stored = await store.get(record.id)
    assert stored.name == "Maria"
    assert stored.file_type == "pdf"
