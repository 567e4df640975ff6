"""
API заказов: создание со сверкой сумм, чтение, заказы пользователя и расчет корзины.
"""
from sqlalchemy.exc import OperationalError

from restaurant.infrastructure.repositories import SQLAlchemyOutboxRepository


async def test_create_order_persists_submitted_totals(client, seeded, order_payload):
    response = await client.post("/api/orders", json=order_payload)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["subtotal"] == 130
    assert body["discount"] == 13
    assert body["total"] == 117
    assert body["promotionId"] == "promo-10"

    fetched = await client.get(f"/api/orders/{body['id']}")
    assert fetched.status_code == 200
    order = fetched.json()
    assert order["total"] == 117
    assert sorted((i["menuItemId"], i["quantity"]) for i in order["items"]) == [
        ("item-1", 2), ("item-2", 1)
    ]


async def test_create_order_writes_order_created_event(client, seeded, order_payload, uow):
    response = await client.post("/api/orders", json=order_payload)
    assert response.status_code == 201

    async with uow() as u:
        events = await u.outbox.get_pending()

    assert [e["event_type"] for e in events] == ["order.created"]
    assert events[0]["order_id"] == response.json()["id"]


async def test_total_off_by_one_is_rejected(client, seeded, order_payload, uow):
    order_payload["total"] = 118

    response = await client.post("/api/orders", json=order_payload)

    assert response.status_code == 400
    assert "total" in response.json()["error"]
    async with uow() as u:
        assert await u.orders.list_by_user("user-1") == []


async def test_unknown_promotion_is_rejected_before_totals(client, seeded, order_payload):
    order_payload["promotionId"] = "missing-promo"
    order_payload["total"] = 1

    response = await client.post("/api/orders", json=order_payload)

    assert response.status_code == 404
    assert "missing-promo" in response.json()["error"]


async def test_minimum_order_not_met_is_rejected(client, seeded):
    payload = {
        "userId": "user-1",
        "items": [
            {"menuItemId": "item-1", "quantity": 1, "price": 50},
            {"menuItemId": "item-2", "quantity": 1, "price": 30},
        ],
        "promotionId": "promo-10",
        "subtotal": 90,
        "discount": 9,
        "total": 81,
    }

    response = await client.post("/api/orders", json=payload)

    assert response.status_code == 400
    assert "100" in response.json()["error"]


async def test_unknown_menu_item_is_named_in_error(client, seeded, order_payload):
    order_payload["items"][1]["menuItemId"] = "ghost-item"

    response = await client.post("/api/orders", json=order_payload)

    assert response.status_code == 404
    assert "ghost-item" in response.json()["error"]


async def test_unknown_user_is_rejected(client, seeded, order_payload):
    order_payload["userId"] = "nobody"

    response = await client.post("/api/orders", json=order_payload)

    assert response.status_code == 404


async def test_guest_order_requires_full_contact(client, seeded, order_payload):
    order_payload.pop("userId")
    order_payload["guestName"] = "Guest"

    response = await client.post("/api/orders", json=order_payload)

    assert response.status_code == 400


async def test_guest_order_is_created(client, seeded, order_payload):
    order_payload.pop("userId")
    order_payload.update(guestName="Guest", guestEmail="guest@example.com", guestPhone="91234567")

    response = await client.post("/api/orders", json=order_payload)

    assert response.status_code == 201
    body = response.json()
    assert body["userId"] is None
    assert body["guestEmail"] == "guest@example.com"


async def test_empty_order_is_rejected(client, seeded, order_payload):
    order_payload.update(items=[], subtotal=0, discount=0, total=0, promotionId=None)

    response = await client.post("/api/orders", json=order_payload)

    assert response.status_code == 400


async def test_non_positive_quantity_is_rejected(client, seeded, order_payload):
    order_payload["items"][0]["quantity"] = 0

    response = await client.post("/api/orders", json=order_payload)

    assert response.status_code == 400
    assert "quantity" in response.json()["error"]


async def test_failed_write_leaves_no_partial_order(client, seeded, order_payload, uow, monkeypatch):
    async def broken_create(self, event_type, event_data, order_id):
        raise OperationalError("INSERT INTO outbox_events", {}, Exception("disk I/O error"))

    monkeypatch.setattr(SQLAlchemyOutboxRepository, "create", broken_create)

    response = await client.post("/api/orders", json=order_payload)

    assert response.status_code == 500
    assert response.json() == {"error": "Ошибка сохранения данных"}
    async with uow() as u:
        assert await u.orders.list_by_user("user-1") == []


async def test_get_missing_order_returns_404(client, seeded):
    response = await client.get("/api/orders/does-not-exist")

    assert response.status_code == 404
    assert "error" in response.json()


async def test_user_orders_newest_first(client, seeded, order_payload):
    first = (await client.post("/api/orders", json=order_payload)).json()
    order_payload.update(
        items=[{"menuItemId": "item-2", "quantity": 1, "price": 30}],
        promotionId=None, subtotal=30, discount=0, total=30,
    )
    second = (await client.post("/api/orders", json=order_payload)).json()

    response = await client.get("/api/orders/user/user-1")

    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == [second["id"], first["id"]]


async def test_cart_quote_applies_best_promotion(client, seeded):
    response = await client.post(
        "/api/cart/quote",
        json={"items": [
            {"menuItemId": "item-1", "quantity": 2},
            {"menuItemId": "item-2", "quantity": 1},
        ]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["subtotal"] == 130
    assert body["discount"] == 13
    assert body["total"] == 117
    assert body["appliedPromotion"]["id"] == "promo-10"


async def test_cart_quote_merges_repeated_lines(client, seeded):
    response = await client.post(
        "/api/cart/quote",
        json={"items": [
            {"menuItemId": "item-2", "quantity": 1},
            {"menuItemId": "item-2", "quantity": 2},
        ]},
    )

    body = response.json()
    assert len(body["items"]) == 1
    assert body["items"][0]["quantity"] == 3
    assert body["appliedPromotion"] is None
    assert body["total"] == 90


async def test_menu_lists_only_available_items(client, seeded):
    response = await client.get("/api/menu")

    assert response.status_code == 200
    assert {item["id"] for item in response.json()} == {"item-1", "item-2"}


async def test_restaurant_overview_groups_menu(client, seeded):
    response = await client.get("/api/restaurant")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Test Restaurant"
    assert body["categories"][0]["name"] == "Main"
    assert len(body["categories"][0]["items"]) == 2
    assert body["promotions"][0]["minimumOrder"] == 100


async def test_sub_cent_amounts_are_rejected(client, seeded, uow):
    payload = {
        "userId": "user-1",
        "items": [{"menuItemId": "item-1", "quantity": 3, "price": 33.333}],
        "subtotal": 99.999,
        "discount": 0,
        "total": 99.999,
    }

    response = await client.post("/api/orders", json=payload)

    assert response.status_code == 400
    assert "price" in response.json()["error"]
    async with uow() as u:
        assert await u.orders.list_by_user("user-1") == []


async def test_stored_order_matches_created_order(client, seeded, order_payload):
    order_payload.update(
        items=[{"menuItemId": "item-1", "quantity": 3, "price": 33.33}],
        promotionId=None, subtotal=99.99, discount=0, total=99.99,
    )

    created = (await client.post("/api/orders", json=order_payload)).json()
    fetched = (await client.get(f"/api/orders/{created['id']}")).json()

    assert created["subtotal"] == fetched["subtotal"] == 99.99
    assert created["total"] == fetched["total"] == 99.99
    assert fetched["items"][0]["price"] == 33.33
