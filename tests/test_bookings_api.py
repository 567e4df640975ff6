"""
Бронирование столиков: лимиты из профиля ресторана и статусы брони.
"""
from datetime import date, timedelta

import pytest


def booking_payload(days_ahead=1, people=4, time="19:00", user_id="user-1"):
    return {
        "userId": user_id,
        "customerName": "Customer",
        "phoneNumber": "91234567",
        "date": (date.today() + timedelta(days=days_ahead)).isoformat(),
        "time": time,
        "numberOfPeople": people,
    }


async def test_create_booking(client, seeded):
    response = await client.post("/api/bookings", json=booking_payload())

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "pending"
    assert body["numberOfPeople"] == 4
    assert body["time"] == "19:00"


@pytest.mark.parametrize("payload", [
    booking_payload(people=7),
    booking_payload(days_ahead=-1),
    booking_payload(days_ahead=31),
])
async def test_booking_outside_profile_limits_is_rejected(client, seeded, payload):
    response = await client.post("/api/bookings", json=payload)

    assert response.status_code == 400
    assert "error" in response.json()


async def test_booking_on_last_allowed_day(client, seeded):
    response = await client.post("/api/bookings", json=booking_payload(days_ahead=30))

    assert response.status_code == 201


async def test_invalid_time_format_is_rejected(client, seeded):
    response = await client.post("/api/bookings", json=booking_payload(time="7pm"))

    assert response.status_code == 400


async def test_booking_for_unknown_user(client, seeded):
    response = await client.post("/api/bookings", json=booking_payload(user_id="nobody"))

    assert response.status_code == 404


async def test_slot_is_full_after_limit(client, seeded):
    for _ in range(2):
        assert (await client.post("/api/bookings", json=booking_payload())).status_code == 201

    full = await client.post("/api/bookings", json=booking_payload())
    other_time = await client.post("/api/bookings", json=booking_payload(time="20:00"))

    assert full.status_code == 400
    assert other_time.status_code == 201


async def test_cancelled_booking_frees_the_slot(client, seeded, admin_headers):
    first = (await client.post("/api/bookings", json=booking_payload())).json()["id"]
    await client.post("/api/bookings", json=booking_payload())
    await client.patch(
        f"/api/admin/bookings/{first}", json={"status": "cancelled"}, headers=admin_headers
    )

    response = await client.post("/api/bookings", json=booking_payload())

    assert response.status_code == 201


async def test_user_bookings_are_listed(client, seeded):
    await client.post("/api/bookings", json=booking_payload(days_ahead=3))
    await client.post("/api/bookings", json=booking_payload(days_ahead=1))
    await client.post("/api/bookings", json=booking_payload(user_id=None))

    response = await client.get("/api/bookings/user/user-1")

    assert response.status_code == 200
    dates = [b["date"] for b in response.json()]
    assert dates == sorted(dates)
    assert len(dates) == 2


async def test_admin_booking_status_transitions(client, seeded, admin_headers):
    booking_id = (await client.post("/api/bookings", json=booking_payload())).json()["id"]

    confirmed = await client.patch(
        f"/api/admin/bookings/{booking_id}", json={"status": "confirmed"}, headers=admin_headers
    )
    completed = await client.patch(
        f"/api/admin/bookings/{booking_id}", json={"status": "completed"}, headers=admin_headers
    )
    reopened = await client.patch(
        f"/api/admin/bookings/{booking_id}", json={"status": "pending"}, headers=admin_headers
    )

    assert confirmed.json()["status"] == "confirmed"
    assert completed.json()["status"] == "completed"
    assert reopened.status_code == 400


async def test_cancelled_booking_cannot_be_confirmed(client, seeded, admin_headers):
    booking_id = (await client.post("/api/bookings", json=booking_payload())).json()["id"]
    await client.patch(
        f"/api/admin/bookings/{booking_id}", json={"status": "cancelled"}, headers=admin_headers
    )

    response = await client.patch(
        f"/api/admin/bookings/{booking_id}", json={"status": "confirmed"}, headers=admin_headers
    )

    assert response.status_code == 400


async def test_admin_lists_bookings_by_status(client, seeded, admin_headers):
    kept = (await client.post("/api/bookings", json=booking_payload())).json()["id"]
    dropped = (await client.post("/api/bookings", json=booking_payload(time="20:00"))).json()["id"]
    await client.patch(
        f"/api/admin/bookings/{dropped}", json={"status": "cancelled"}, headers=admin_headers
    )

    response = await client.get("/api/admin/bookings?status=pending", headers=admin_headers)

    assert [b["id"] for b in response.json()] == [kept]
