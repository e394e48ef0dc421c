import asyncio

from najaf.models import UserRole
from najaf.services.notifications import (
    MockNotificationService,
    NEW_ORDER_CHIME,
    RealNotificationService,
    get_notification_service,
)


def test_chime_tone_shape():
    assert NEW_ORDER_CHIME.wave == "sine"
    assert (NEW_ORDER_CHIME.start_hz, NEW_ORDER_CHIME.end_hz) == (500.0, 1000.0)
    assert NEW_ORDER_CHIME.ramp_seconds == 0.1
    assert (NEW_ORDER_CHIME.start_gain, NEW_ORDER_CHIME.end_gain) == (0.5, 0.01)
    assert NEW_ORDER_CHIME.duration_seconds == 0.5


def test_queue_and_drain():
    service = RealNotificationService()
    result = asyncio.run(service.play_new_order_chime("s1", UserRole.KITCHEN, 3))
    assert result.success

    events = service.drain("s1")
    assert len(events) == 1
    assert events[0].order_count == 3
    assert events[0].start_hz == 500.0
    assert service.drain("s1") == []


def test_customers_get_no_chime():
    service = RealNotificationService()
    result = asyncio.run(service.play_new_order_chime("s1", UserRole.CUSTOMER, 1))
    assert not result.success
    assert service.drain("s1") == []


def test_forget_drops_queued_chimes():
    service = RealNotificationService()
    asyncio.run(service.play_new_order_chime("s1", UserRole.ADMIN, 1))
    service.forget("s1")
    assert service.drain("s1") == []


def test_queue_is_bounded():
    service = RealNotificationService(max_queued=2)
    for count in range(5):
        asyncio.run(service.play_new_order_chime("s1", UserRole.MANAGER, count))
    assert [e.order_count for e in service.drain("s1")] == [3, 4]


def test_development_mode_uses_mock():
    assert isinstance(get_notification_service(), MockNotificationService)


def test_mock_history_is_bounded_per_session():
    service = MockNotificationService(max_recorded=2)
    for count in range(5):
        asyncio.run(service.play_new_order_chime("s1", UserRole.KITCHEN, count))
    asyncio.run(service.play_new_order_chime("s2", UserRole.ADMIN, 9))

    assert service.count_for("s1") == 2
    assert service.history == [
        ("s1", UserRole.KITCHEN, 3),
        ("s1", UserRole.KITCHEN, 4),
        ("s2", UserRole.ADMIN, 9),
    ]


def test_mock_forget_drops_session_history():
    service = MockNotificationService()
    asyncio.run(service.play_new_order_chime("s1", UserRole.KITCHEN, 1))
    asyncio.run(service.play_new_order_chime("s2", UserRole.KITCHEN, 1))

    service.forget("s1")
    assert service.drain("s2") == []

    assert service.count_for("s1") == 0
    assert service.count_for("s2") == 0
    assert service.history == []
