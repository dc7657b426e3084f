from datetime import timedelta

import pytest

from app.constants import BookingStatus
from app.models_booking import PreOrder
from app.models_menu import Product
from app.shared.datetime_utils import utcnow


@pytest.fixture
def products(db):
    rows = [Product(name="Pho Bo", price=65000), Product(name="Iced Tea", price=15000)]
    db.add_all(rows)
    db.commit()
    return rows


@pytest.fixture
def order_payload(branch, products):
    when = utcnow() + timedelta(days=1)

    def _payload(**overrides):
        payload = {
            "type": "takeaway",
            "branchId": branch.id,
            "time": when.isoformat(),
            "customerName": "Quang Do",
            "customerPhone": "0987654321",
            "paymentType": "banking",
            "orderItems": {
                "product": [
                    {"id": products[0].id, "quantity": 2},
                    {"id": products[1].id, "quantity": 1, "note": "less ice"},
                ]
            },
        }
        payload.update(overrides)
        return payload

    return _payload


def test_takeaway_deposit_uses_default_percentage(client, order_payload, manager_headers):
    response = client.post("/pre-orders/admin/create", json=order_payload(), headers=manager_headers)

    assert response.status_code == 200
    pre_order = response.json()["payload"]
    assert pre_order["totalAmount"] == 145000
    assert pre_order["totalDeposit"] == 43500
    assert pre_order["totalItems"] == 3
    assert pre_order["bookingStatus"] == BookingStatus.BOOKED.value
    assert pre_order["expireTime"] is not None


def test_branch_deposit_percentage_applies(client, branch, order_payload, manager_headers):
    config = client.put(
        f"/pre-order-config/branch/{branch.id}", json={"depositPercentage": 50}, headers=manager_headers
    ).json()["payload"]
    assert config["isDefault"] is False

    pre_order = client.post("/pre-orders/admin/create", json=order_payload(), headers=manager_headers).json()["payload"]

    assert pre_order["totalDeposit"] == 72500


def test_dine_in_needs_a_booking(client, order_payload, manager_headers):
    response = client.post("/pre-orders/admin/create", json=order_payload(type="dine-in"), headers=manager_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Dine-in pre-orders require a table booking"


def test_dine_in_links_booking(client, tables, order_payload, manager_headers):
    start = (utcnow() + timedelta(days=1)).replace(microsecond=0)
    booking = client.post(
        "/booking-table/create",
        json={
            "startTime": start.isoformat(),
            "duration": 2,
            "guests": 2,
            "tableId": [tables[0].id],
            "customerName": "Quang Do",
            "customerPhone": "0987654321",
        },
    ).json()["payload"]

    response = client.post(
        "/pre-orders/admin/create",
        json=order_payload(type="dine-in", bookingTableId=booking["id"], paymentType="cash"),
        headers=manager_headers,
    )

    pre_order = response.json()["payload"]
    assert pre_order["bookingTableId"] == booking["id"]
    assert pre_order["bookingStatus"] == BookingStatus.DEPOSIT_PAID.value


def test_unknown_product_is_not_found(client, order_payload, manager_headers):
    payload = order_payload(orderItems={"product": [{"id": 999, "quantity": 1}]})

    assert client.post("/pre-orders/admin/create", json=payload, headers=manager_headers).status_code == 404


def test_status_changes_follow_lifecycle(client, order_payload, manager_headers):
    pre_order_id = client.post(
        "/pre-orders/admin/create", json=order_payload(), headers=manager_headers
    ).json()["payload"]["id"]

    paid = client.put(
        f"/pre-orders/{pre_order_id}/status", json={"bookingStatus": "DEPOSIT_PAID"}, headers=manager_headers
    )
    assert paid.json()["payload"]["bookingStatus"] == BookingStatus.DEPOSIT_PAID.value

    back = client.put(f"/pre-orders/{pre_order_id}/status", json={"bookingStatus": "BOOKED"}, headers=manager_headers)
    assert back.status_code == 400


def test_unpaid_pre_orders_expire(client, db, order_payload, manager_headers):
    pre_order_id = client.post(
        "/pre-orders/admin/create", json=order_payload(), headers=manager_headers
    ).json()["payload"]["id"]
    paid_id = client.post(
        "/pre-orders/admin/create", json=order_payload(customerName="Lan Mai"), headers=manager_headers
    ).json()["payload"]["id"]
    client.put(f"/pre-orders/{paid_id}/status", json={"bookingStatus": "DEPOSIT_PAID"}, headers=manager_headers)
    for row in db.query(PreOrder).all():
        row.expire_time = utcnow() - timedelta(minutes=1)
    db.commit()

    result = client.post("/status/automation/expire-bookings", headers=manager_headers).json()["payload"]

    assert result == {"bookings_cancelled": 0, "pre_orders_cancelled": 1, "total_updated": 1}
    expired = client.get(f"/pre-orders/{pre_order_id}", headers=manager_headers).json()["payload"]
    assert expired["bookingStatus"] == BookingStatus.CANCELLED.value
    paid = client.get(f"/pre-orders/{paid_id}", headers=manager_headers).json()["payload"]
    assert paid["bookingStatus"] == BookingStatus.DEPOSIT_PAID.value
