import asyncio

import pytest

from najaf.core.exceptions import SessionNotFoundError
from najaf.models import UserRole
from najaf.services.notifications import MockNotificationService
from najaf.services.ordering import CustomerDetails
from najaf.services.sessions import SessionManager


def make_manager(store, autostart=False, idle_timeout=60):
    return SessionManager(
        store=store,
        notifier=MockNotificationService(),
        poll_interval=0.01,
        autostart_pollers=autostart,
        idle_timeout=idle_timeout,
    )


def test_create_and_get(store):
    manager = make_manager(store)
    session = asyncio.run(manager.create(UserRole.CUSTOMER))

    assert manager.get(session.id) is session
    assert session.role == UserRole.CUSTOMER
    assert len(session.state.products) == 4
    assert len(manager) == 1


def test_unknown_or_missing_session(store):
    manager = make_manager(store)
    with pytest.raises(SessionNotFoundError):
        manager.get("missing")
    with pytest.raises(SessionNotFoundError):
        manager.get(None)


def test_switch_role_drops_cart(store):
    manager = make_manager(store)
    session = asyncio.run(manager.create(UserRole.CUSTOMER))
    session.state.add_to_cart(session.state.get_product("1"))

    manager.switch_role(session.id, UserRole.MANAGER)

    assert session.role == UserRole.MANAGER
    assert session.state.cart.is_empty


def test_end_forgets_session(store):
    manager = make_manager(store)
    session = asyncio.run(manager.create(UserRole.KITCHEN))

    asyncio.run(manager.end(session.id))

    assert session.id not in manager
    with pytest.raises(SessionNotFoundError):
        asyncio.run(manager.end(session.id))


def test_kitchen_hears_customer_order(store):
    manager = make_manager(store, autostart=True)

    async def scenario():
        kitchen = await manager.create(UserRole.KITCHEN)
        customer = await manager.create(UserRole.CUSTOMER)

        customer.state.add_to_cart(customer.state.get_product("3"))
        order = await customer.state.place_order(CustomerDetails(name="Ali", phone="0500", address="X"))

        await asyncio.sleep(0.1)
        chimes = manager.notifier.count_for(kitchen.id), manager.notifier.count_for(customer.id)
        await manager.shutdown()
        return kitchen, order, chimes

    kitchen, order, chimes = asyncio.run(scenario())

    assert [o.id for o in kitchen.state.orders] == [order.id]
    assert chimes == (1, 0)
    assert manager.notifier.count_for(kitchen.id) == 0
    assert not kitchen.poller.running
    assert len(manager) == 0


def test_idle_sessions_are_evicted(store):
    manager = make_manager(store, idle_timeout=60)
    idle = asyncio.run(manager.create(UserRole.CUSTOMER))
    active = asyncio.run(manager.create(UserRole.KITCHEN))

    now = idle.last_seen + 61
    active.last_seen = now - 1

    assert asyncio.run(manager.evict_idle(now=now)) == 1
    assert idle.id not in manager
    assert active.id in manager
    with pytest.raises(SessionNotFoundError):
        manager.get(idle.id)


def test_get_refreshes_last_seen(store):
    manager = make_manager(store)
    session = asyncio.run(manager.create(UserRole.ADMIN))
    session.last_seen -= 1000

    before = session.last_seen
    manager.get(session.id)

    assert session.last_seen > before
    assert asyncio.run(manager.evict_idle()) == 0


def test_sweeper_ends_idle_sessions_and_stops_on_shutdown(store):
    manager = make_manager(store, autostart=True, idle_timeout=0.01)

    async def scenario():
        session = await manager.create(UserRole.MANAGER)
        manager.start_sweeper(interval=0.01)
        await asyncio.sleep(0.1)
        evicted = session.id not in manager
        await manager.shutdown()
        return session, evicted

    session, evicted = asyncio.run(scenario())
    assert evicted
    assert not session.poller.running
    assert manager._sweeper is None
