"""
Публикация событий из outbox: успешные помечаются published, неудачные остаются pending.
"""
from restaurant.application.process_outbox import ProcessOutboxEventsUseCase


class FakePublisher:
    def __init__(self, fail_for=()):
        self.sent = []
        self._fail_for = set(fail_for)

    async def publish(self, event_type, key, payload):
        if key in self._fail_for:
            return False
        self.sent.append((event_type, key, payload))
        return True


async def _add_events(uow, *order_ids):
    async with uow() as u:
        for order_id in order_ids:
            await u.outbox.create("order.created", {"order_id": order_id}, order_id)
        await u.commit()


async def test_published_events_leave_the_queue(uow):
    await _add_events(uow, "order-1", "order-2")
    publisher = FakePublisher()

    published = await ProcessOutboxEventsUseCase(uow, publisher)(limit=10)

    assert published == 2
    assert sorted(key for _, key, _ in publisher.sent) == ["order-1", "order-2"]
    assert all(payload == {"order_id": key} for _, key, payload in publisher.sent)
    async with uow() as u:
        assert await u.outbox.get_pending() == []


async def test_failed_events_stay_pending(uow):
    await _add_events(uow, "order-1", "order-2")
    publisher = FakePublisher(fail_for={"order-2"})

    published = await ProcessOutboxEventsUseCase(uow, publisher)(limit=10)

    assert published == 1
    async with uow() as u:
        pending = await u.outbox.get_pending()
    assert [e["order_id"] for e in pending] == ["order-2"]


async def test_batch_limit_is_respected(uow):
    await _add_events(uow, "order-1", "order-2", "order-3")
    publisher = FakePublisher()

    assert await ProcessOutboxEventsUseCase(uow, publisher)(limit=2) == 2
    assert await ProcessOutboxEventsUseCase(uow, publisher)(limit=2) == 1
    assert await ProcessOutboxEventsUseCase(uow, publisher)(limit=2) == 0
