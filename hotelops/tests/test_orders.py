from datetime import datetime, timedelta, timezone

import pytest

from hotelops.app.db import get_sessionmaker
from hotelops.app.errors import BadRequest, NotFound
from hotelops.app.repos_sqlalchemy import orders_repo_sql
from hotelops.app.services import orders

HOTEL_SLUG = "sunrise"
NOW = datetime(2025, 3, 1, 20, 0, tzinfo=timezone.utc)


@pytest.mark.anyio
async def test_new_order_is_preparing_with_price_snapshot(session, hotel):
    created = await orders.create_order(session, HOTEL_SLUG, "tea", qty=0, room="7", now=NOW)
    order = await orders.get_order(session, created["id"])
    assert order["status"] == "preparing"
    assert order["qty"] == 1
    assert order["price"] == 60.0
    assert order["closed_at"] is None


@pytest.mark.anyio
async def test_create_order_rejects_unavailable_items(session, hotel):
    for key, code in [("sushi", "ITEM_UNAVAILABLE"), ("soup", "ITEM_UNPRICED")]:
        with pytest.raises(BadRequest) as exc:
            await orders.create_order(session, HOTEL_SLUG, key, now=NOW)
        assert exc.value.code == code
    with pytest.raises(BadRequest) as exc:
        await orders.create_order(session, "nowhere", "tea", now=NOW)
    assert exc.value.code == "UNKNOWN_HOTEL"


@pytest.mark.anyio
@pytest.mark.parametrize("terminal", ["delivered", "cancelled"])
async def test_terminal_status_stamps_closed_at(session, hotel, terminal):
    oid = (await orders.create_order(session, HOTEL_SLUG, "tea", now=NOW))["id"]
    done_at = NOW + timedelta(minutes=12)
    ack = await orders.set_order_status(session, oid, terminal, now=done_at)
    assert ack == {"id": oid, "status": terminal, "changed": True}

    order = await orders.get_order(session, oid)
    assert order["status"] == terminal
    assert order["closed_at"].startswith("2025-03-01T20:12:00")


@pytest.mark.anyio
async def test_preparing_after_terminal_is_rejected(session, hotel):
    oid = (await orders.create_order(session, HOTEL_SLUG, "tea", now=NOW))["id"]
    await orders.set_order_status(session, oid, "delivered", now=NOW)

    with pytest.raises(BadRequest) as exc:
        await orders.set_order_status(session, oid, "preparing", now=NOW)
    assert exc.value.code == "ORDER_CLOSED"
    with pytest.raises(BadRequest):
        await orders.set_order_status(session, oid, "cancelled", now=NOW)

    order = await orders.get_order(session, oid)
    assert order["status"] == "delivered"
    assert order["closed_at"] is not None


@pytest.mark.anyio
async def test_repeating_status_is_a_noop(session, hotel):
    oid = (await orders.create_order(session, HOTEL_SLUG, "tea", now=NOW))["id"]
    ack = await orders.set_order_status(session, oid, "preparing", now=NOW)
    assert ack["changed"] is False
    await orders.set_order_status(session, oid, "cancelled", now=NOW)
    first = await orders.get_order(session, oid)
    ack = await orders.set_order_status(session, oid, "cancelled", now=NOW + timedelta(hours=1))
    assert ack["changed"] is False
    assert (await orders.get_order(session, oid))["closed_at"] == first["closed_at"]


@pytest.mark.anyio
async def test_stale_cancel_cannot_overwrite_delivered_order(engine, session, hotel):
    oid = (await orders.create_order(session, HOTEL_SLUG, "tea", now=NOW))["id"]
    Session = get_sessionmaker(engine)
    async with Session() as desk, Session() as kitchen:
        stale = await orders_repo_sql.get_order(desk, oid)
        await desk.commit()
        assert stale.status == "preparing"

        await orders.set_order_status(kitchen, oid, "delivered", now=NOW + timedelta(minutes=10))

        with pytest.raises(BadRequest) as exc:
            await orders.set_order_status(
                desk, oid, "cancelled", now=NOW + timedelta(minutes=11)
            )
        assert exc.value.code == "ORDER_CLOSED"

    async with Session() as fresh:
        order = await orders.get_order(fresh, oid)
    assert order["status"] == "delivered"
    assert order["closed_at"].startswith("2025-03-01T20:10:00")


@pytest.mark.anyio
async def test_racing_identical_status_is_acknowledged(engine, session, hotel):
    oid = (await orders.create_order(session, HOTEL_SLUG, "tea", now=NOW))["id"]
    Session = get_sessionmaker(engine)
    async with Session() as first, Session() as second:
        await orders_repo_sql.get_order(first, oid)
        await first.commit()
        await orders.set_order_status(second, oid, "delivered", now=NOW)

        ack = await orders.set_order_status(first, oid, "delivered", now=NOW)
    assert ack == {"id": oid, "status": "delivered", "changed": False}


@pytest.mark.anyio
async def test_status_validation(session, hotel):
    with pytest.raises(BadRequest):
        await orders.set_order_status(session, "", "delivered")
    with pytest.raises(BadRequest):
        await orders.set_order_status(session, "x", None)
    with pytest.raises(BadRequest):
        await orders.set_order_status(session, "x", "served")
    with pytest.raises(NotFound):
        await orders.set_order_status(session, "x", "delivered")


@pytest.mark.anyio
async def test_order_routes(client, hotel, auth):
    resp = await client.post("/orders", json={"slug": HOTEL_SLUG, "item_key": "tea", "qty": 2})
    assert resp.status_code == 200
    oid = resp.json()["data"]["id"]

    resp = await client.post(f"/orders/{oid}/status", json={"status": "delivered"})
    assert resp.status_code == 401

    resp = await client.post(
        f"/orders/{oid}/status", json={"status": "delivered"}, headers=auth("staff")
    )
    assert resp.json()["data"]["status"] == "delivered"

    resp = await client.post(
        f"/orders/{oid}/status", json={"status": "preparing"}, headers=auth("owner")
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "ORDER_CLOSED"

    data = (await client.get(f"/orders/{oid}")).json()["data"]
    assert data["qty"] == 2
    assert data["closed_at"] is not None


@pytest.mark.anyio
async def test_order_body_type_errors_are_bad_requests(client, hotel):
    resp = await client.post("/orders", json={"slug": HOTEL_SLUG, "item_key": "tea", "qty": "lots"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["ok"] is False
    assert body["error"]["code"] == "BAD_REQUEST"
    assert "body.qty" in body["error"]["details"]["fields"]
