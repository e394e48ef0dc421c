import asyncio
import json

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from najaf.core.exceptions import StorageError
from najaf.schemas import Product
from najaf.services.ordering import StateRepository
from najaf.services.storage import (
    DatabaseKeyValueStore,
    FileKeyValueStore,
    MemoryKeyValueStore,
    ORDERS_KEY,
    PRODUCTS_KEY,
)
from tests.conftest import make_order


async def exercise(store):
    assert await store.get(ORDERS_KEY) is None
    await store.set(ORDERS_KEY, "[]")
    await store.set(ORDERS_KEY, '["second"]')
    value = await store.get(ORDERS_KEY)
    await store.delete(ORDERS_KEY)
    missing = await store.get(ORDERS_KEY)
    healthy = await store.health_check()
    await store.close()
    return value, missing, healthy


def test_memory_store():
    assert asyncio.run(exercise(MemoryKeyValueStore())) == ('["second"]', None, True)


def test_file_store(tmp_path):
    store = FileKeyValueStore(tmp_path / "data", lock_timeout=1)
    assert asyncio.run(exercise(store)) == ('["second"]', None, True)


def test_file_store_writes_json_files(tmp_path):
    store = FileKeyValueStore(tmp_path)
    repository = StateRepository(store)
    asyncio.run(repository.save_orders([make_order("order0001")]))

    data = json.loads((tmp_path / "orders.json").read_text(encoding="utf-8"))
    assert data[0]["id"] == "order0001"
    assert data[0]["customerName"] == "Ali"
    assert data[0]["isNew"] is False


def test_file_stores_share_a_directory(tmp_path):
    writer = StateRepository(FileKeyValueStore(tmp_path))
    reader = StateRepository(FileKeyValueStore(tmp_path))

    asyncio.run(writer.save_products([Product(id="p1", name="شاي", price=5)]))
    products = asyncio.run(reader.load_products())
    assert [p.id for p in products] == ["p1"]


def test_database_store(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'db' / 'najaf.db'}")
    assert asyncio.run(exercise(DatabaseKeyValueStore(engine))) == ('["second"]', None, True)


def test_database_store_keeps_keys_apart(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'najaf.db'}")
    store = DatabaseKeyValueStore(engine)

    async def scenario():
        await store.set(PRODUCTS_KEY, "products")
        await store.set(ORDERS_KEY, "orders")
        values = await store.get(PRODUCTS_KEY), await store.get(ORDERS_KEY)
        await store.close()
        return values

    assert asyncio.run(scenario()) == ("products", "orders")


def test_database_errors_become_storage_errors(tmp_path):
    # a directory cannot be opened as a SQLite file
    store = DatabaseKeyValueStore(create_async_engine(f"sqlite+aiosqlite:///{tmp_path}"))

    async def scenario():
        with pytest.raises(StorageError):
            await store.set(ORDERS_KEY, "[]")
        with pytest.raises(StorageError):
            await store.delete(ORDERS_KEY)
        await store.close()

    asyncio.run(scenario())


@pytest.mark.parametrize("raw", ["", "null", "[]", '{"a": 1}', "not json"])
def test_unusable_products_fall_back_to_default_menu(raw):
    store = MemoryKeyValueStore({PRODUCTS_KEY: raw})
    products = asyncio.run(StateRepository(store).load_products())
    assert [p.id for p in products] == ["1", "2", "3", "4"]
