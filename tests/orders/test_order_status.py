"""Order status state machine driven by the owning supplier."""

from datetime import datetime, timedelta, timezone

import pytest

from marketplace_service.app.crud import order_workflow_crud
from marketplace_service.app.enum.order_enum import OrderStatus
from marketplace_service.app.models.orders import Order, as_utc
from marketplace_service.app.schemas.orders_schemas import OrderStatusUpdate
from shared.core.schemas import UserToken
from shared.utils.exceptions import ConcurrentUpdateError

ALL_STATUSES = [s.value for s in OrderStatus]
ALLOWED = {
    ("pending", "confirmed"),
    ("pending", "cancelled"),
    ("confirmed", "dispatched"),
    ("confirmed", "cancelled"),
    ("dispatched", "delivered"),
}


@pytest.fixture
def order_id(place_order, vendor, supplier, make_product):
    onions = make_product(supplier)
    return place_order(vendor, [(onions, 2)]).json()["data"]["order"]["id"]


def _status(client, headers, order_id, supplier, status):
    return client.put(f"/api/orders/{order_id}/status",
                      json={"status": status}, headers=headers(supplier))


def _path_to(status):
    return {
        "pending": [],
        "confirmed": ["confirmed"],
        "dispatched": ["confirmed", "dispatched"],
        "delivered": ["confirmed", "dispatched", "delivered"],
        "cancelled": ["cancelled"],
    }[status]


class TestTransitions:
    def test_happy_path_sets_delivery_dates(self, client, headers, advance, order_id, supplier):
        before = datetime.now(timezone.utc)

        confirmed = advance(order_id, supplier, "confirmed").json()
        assert confirmed["message"] == "Order status updated successfully"
        order = confirmed["data"]["order"]
        assert order["status"] == "confirmed"
        expected = as_utc(datetime.fromisoformat(order["expected_delivery_date"]))
        assert before + timedelta(days=2) <= expected <= datetime.now(
            timezone.utc) + timedelta(days=2)
        assert order["actual_delivery_date"] is None

        dispatched = advance(order_id, supplier, "dispatched").json()["data"]["order"]
        assert dispatched["status"] == "dispatched"
        assert dispatched["actual_delivery_date"] is None

        delivered = advance(order_id, supplier, "delivered").json()["data"]["order"]
        assert delivered["status"] == "delivered"
        assert delivered["actual_delivery_date"] is not None
        assert delivered["delivery_status"] == "delivered"

    def test_pending_cannot_jump_to_dispatched(self, db, client, headers, order_id, supplier):
        response = _status(client, headers, order_id, supplier, "dispatched")

        assert response.status_code == 400
        assert response.json()["message"] == "Cannot change status from pending to dispatched"
        db.expire_all()
        assert db.query(Order).one().status == OrderStatus.PENDING

    @pytest.mark.parametrize("current", ALL_STATUSES)
    @pytest.mark.parametrize("target", ALL_STATUSES)
    def test_transition_table(self, db, client, headers, advance, order_id, supplier, current, target):
        advance(order_id, supplier, *_path_to(current))

        response = _status(client, headers, order_id, supplier, target)

        db.expire_all()
        stored = db.query(Order).one().status.value
        if (current, target) in ALLOWED:
            assert response.status_code == 200
            assert stored == target
        else:
            assert response.status_code == 400
            assert stored == current
            if current in ("delivered", "cancelled"):
                assert response.json()["message"] == "Order status cannot be changed"
            else:
                assert response.json()["message"] == \
                    f"Cannot change status from {current} to {target}"

    def test_status_required(self, client, headers, order_id, supplier):
        response = client.put(f"/api/orders/{order_id}/status",
                              json={}, headers=headers(supplier))
        assert response.status_code == 400
        assert response.json()["message"] == "Status is required"

    def test_unknown_status_rejected(self, client, headers, order_id, supplier):
        response = _status(client, headers, order_id, supplier, "lost")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid status"

    def test_status_is_case_insensitive(self, client, headers, order_id, vendor, supplier):
        response = _status(client, headers, order_id, supplier, "Confirmed")
        assert response.status_code == 200
        assert response.json()["data"]["order"]["status"] == "confirmed"

        listed = client.get("/api/orders", params={"status": "CONFIRMED"},
                            headers=headers(vendor)).json()["data"]
        assert [o["id"] for o in listed["orders"]] == [order_id]

    def test_other_supplier_forbidden(self, db, client, headers, order_id, other_supplier):
        response = _status(client, headers, order_id, other_supplier, "confirmed")
        assert response.status_code == 403
        db.expire_all()
        assert db.query(Order).one().status == OrderStatus.PENDING

    def test_vendor_cannot_change_status(self, client, headers, order_id, vendor):
        response = _status(client, headers, order_id, vendor, "cancelled")
        assert response.status_code == 403

    def test_unknown_order(self, client, headers, supplier):
        response = _status(client, headers, "f" * 32, supplier, "confirmed")
        assert response.status_code == 404
        assert response.json()["message"] == "Order not found"


class TestNextStatuses:
    @pytest.mark.parametrize("current, expected", [
        ("pending", ["confirmed", "cancelled"]),
        ("confirmed", ["dispatched", "cancelled"]),
        ("dispatched", ["delivered"]),
        ("delivered", []),
        ("cancelled", []),
    ])
    def test_next_statuses(self, client, headers, advance, order_id, vendor, supplier, current, expected):
        advance(order_id, supplier, *_path_to(current))

        response = client.get(
            f"/api/orders/{order_id}/next-statuses", headers=headers(vendor))

        assert response.status_code == 200
        assert response.json()["data"] == {
            "current_status": current, "next_statuses": expected}


class TestConcurrentTransition:
    def test_lost_race_fails_and_leaves_row_untouched(self, db, session_factory, monkeypatch,
                                                      order_id, supplier):
        real_check = order_workflow_crud.check_transition

        def cancel_elsewhere(current, target):
            real_check(current, target)
            other = session_factory()
            try:
                other.query(Order).update({"status": OrderStatus.CANCELLED})
                other.commit()
            finally:
                other.close()

        monkeypatch.setattr(order_workflow_crud,
                            "check_transition", cancel_elsewhere)
        user = UserToken(user_id=str(supplier.id), role="supplier")

        with pytest.raises(ConcurrentUpdateError) as exc:
            order_workflow_crud.update_order_status(
                db, order_id, OrderStatusUpdate(status="confirmed"), user)

        assert exc.value.http_status == 409
        db.expire_all()
        order = db.query(Order).one()
        assert order.status == OrderStatus.CANCELLED
        assert order.expected_delivery_date is None
