import os
import tempfile

# Configure before anything imports najaf: settings are cached on first use.
os.environ["ENV_MODE"] = "development"
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["DATA_DIRECTORY"] = tempfile.mkdtemp(prefix="najaf-tests-")
os.environ["POLL_INTERVAL_SECONDS"] = "60"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ.pop("OPENAI_API_KEY", None)

import pytest
from fastapi.testclient import TestClient

from najaf.core.exceptions import StorageError
from najaf.models import OrderStatus, PaymentMethod
from najaf.schemas import CartItem, Order
from najaf.services.ai import reset_text_generation_service
from najaf.services.notifications import reset_notification_service
from najaf.services.ordering import DEFAULT_PRODUCTS, StateRepository
from najaf.services.storage import MemoryKeyValueStore, reset_storage


def make_order(order_id="order0001", status=OrderStatus.PENDING, items=None, is_new=False, **kwargs):
    items = items if items is not None else [CartItem.from_product(DEFAULT_PRODUCTS[0])]
    return Order(
        id=order_id,
        customer_name=kwargs.get("customer_name", "Ali"),
        customer_phone=kwargs.get("customer_phone", "0500"),
        customer_address=kwargs.get("customer_address", "X"),
        items=items,
        total_amount=sum(i.price * i.quantity for i in items),
        status=status,
        payment_method=kwargs.get("payment_method", PaymentMethod.CASH),
        created_at=kwargs.get("created_at", 1_700_000_000_000),
        is_new=is_new,
    )


class FailingStore(MemoryKeyValueStore):
    """Memory store whose writes can be switched off."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_writes = False

    async def set(self, key, value):
        if self.fail_writes:
            raise StorageError("disk full")
        await super().set(key, value)


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def repository(store):
    return StateRepository(store)


@pytest.fixture
def client():
    reset_storage()
    reset_notification_service()
    reset_text_generation_service()

    from najaf.main import app

    with TestClient(app) as test_client:
        yield test_client

    reset_storage()
    reset_notification_service()
    reset_text_generation_service()


def open_session(client, role):
    res = client.post("/api/session", json={"role": role})
    assert res.status_code == 201
    return {"X-Session-Id": res.json()["session_id"]}


@pytest.fixture
def failing_store():
    return FailingStore()


@pytest.fixture
def failing_client(failing_store, monkeypatch):
    reset_storage()
    reset_notification_service()
    reset_text_generation_service()

    import najaf.main
    monkeypatch.setattr(najaf.main, "get_storage", lambda: failing_store)

    with TestClient(najaf.main.app) as test_client:
        yield test_client

    reset_notification_service()
    reset_text_generation_service()
