import pytest


@pytest.fixture
def place_order(client, headers):
    def _place(vendor, lines, **overrides):
        body = {
            "items": [{"product_id": str(p.id), "quantity": q} for p, q in lines],
            "delivery_address": "Stall 4, Station Road",
            "phone": "9876543210",
        }
        body.update(overrides)
        return client.post("/api/orders", json=body, headers=headers(vendor))

    return _place


@pytest.fixture
def advance(client, headers):
    """Drive an order through the given statuses as its supplier."""
    def _advance(order_id, supplier, *statuses):
        response = None
        for status in statuses:
            response = client.put(f"/api/orders/{order_id}/status",
                                  json={"status": status}, headers=headers(supplier))
            assert response.status_code == 200, response.json()
        return response

    return _advance
