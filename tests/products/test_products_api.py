"""Catalog browsing and supplier-owned product management."""

from decimal import Decimal

import pytest

from marketplace_service.app.models.products import Product


def _names(response):
    return [p["name"] for p in response.json()["data"]["products"]]


class TestBrowseProducts:
    def test_lists_only_active_products(self, client, supplier, make_product):
        make_product(supplier, name="Onions")
        make_product(supplier, name="Retired", is_active=False)

        response = client.get("/api/products")

        assert response.status_code == 200
        assert _names(response) == ["Onions"]
        assert response.json()["data"]["pagination"]["total_items"] == 1

    def test_filters(self, client, supplier, other_supplier, make_product):
        make_product(supplier, name="Onions", price=Decimal("20.00"))
        make_product(supplier, name="Mango", category="fruits", price=Decimal("120.00"),
                     description="Alphonso")
        make_product(other_supplier, name="Cumin", category="spices", price=Decimal("300.00"))

        assert _names(client.get("/api/products", params={"category": "fruits"})) == ["Mango"]
        assert _names(client.get("/api/products", params={"search": "alphon"})) == ["Mango"]
        assert _names(client.get("/api/products", params={"search": "spice route"})) == ["Cumin"]
        assert sorted(_names(client.get("/api/products", params={
            "min_price": 50, "max_price": 200}))) == ["Mango"]
        assert len(_names(client.get("/api/products", params={"category": "all"}))) == 3

    def test_sorting_and_pagination(self, client, supplier, make_product):
        for name, price in [("A", "30.00"), ("B", "10.00"), ("C", "20.00")]:
            make_product(supplier, name=name, price=Decimal(price))

        response = client.get("/api/products", params={
            "sort_by": "price", "sort_order": "asc", "limit": 2, "page": 1})

        assert _names(response) == ["B", "C"]
        pagination = response.json()["data"]["pagination"]
        assert pagination["total"] == 2
        assert pagination["has_next"] is True

    def test_negative_limit_rejected(self, client, supplier, make_product):
        make_product(supplier)
        response = client.get("/api/products", params={"limit": -1})
        assert response.status_code == 400

    def test_availability_status(self, client, supplier, make_product):
        make_product(supplier, name="Plenty", stock=10)
        make_product(supplier, name="Few", stock=9)
        make_product(supplier, name="None", stock=0)

        products = client.get("/api/products").json()["data"]["products"]
        statuses = {p["name"]: p["availability_status"] for p in products}

        assert statuses == {"Plenty": "in_stock",
                            "Few": "low_stock", "None": "out_of_stock"}

    def test_categories(self, client):
        categories = client.get("/api/products/categories").json()["data"]["categories"]
        assert categories[0] == {"value": "vegetables", "label": "Vegetables"}
        assert len(categories) == 10

    def test_get_product(self, client, supplier, make_product):
        onions = make_product(supplier)

        response = client.get(f"/api/products/{onions.id}")

        assert response.status_code == 200
        product = response.json()["data"]["product"]
        assert product["supplier"]["name"] == "Fresh Farms"
        assert product["price"] == 10.0

    @pytest.mark.parametrize("product_id", ["bogus", "0" * 32])
    def test_get_missing_product(self, client, product_id):
        response = client.get(f"/api/products/{product_id}")
        assert response.status_code == 404
        assert response.json()["message"] == "Product not found"

    def test_supplier_catalog(self, client, supplier, other_supplier, make_product):
        make_product(supplier, name="Onions")
        make_product(other_supplier, name="Cumin")

        response = client.get(f"/api/products/supplier/{supplier.id}")

        assert _names(response) == ["Onions"]

    def test_recommendations_fallback_to_best_rated(self, client, headers, vendor, supplier, make_product):
        for i in range(8):
            make_product(supplier, name=f"P{i}", rating=float(i % 5))

        response = client.get("/api/products/recommendations", headers=headers(vendor))

        assert response.status_code == 200
        recommended = response.json()["data"]["recommended"]
        assert len(recommended) == 6
        assert recommended[0]["rating"] == 4.0

    def test_recommendations_follow_order_history(self, client, headers, vendor, supplier, make_product):
        mango = make_product(supplier, name="Mango", category="fruits")
        make_product(supplier, name="Banana", category="fruits", rating=4.5)
        make_product(supplier, name="Onions", category="vegetables", rating=5.0)
        client.post("/api/orders", json={
            "items": [{"product_id": str(mango.id), "quantity": 1}],
            "delivery_address": "Stall 4",
            "phone": "9876543210",
        }, headers=headers(vendor))

        recommended = client.get("/api/products/recommendations",
                                 headers=headers(vendor)).json()["data"]["recommended"]

        assert [p["name"] for p in recommended] == ["Banana", "Mango"]


class TestManageProducts:
    def _payload(self, **overrides):
        body = {
            "name": "Coriander",
            "description": "Bunches",
            "price": 15,
            "unit": "piece",
            "stock": 40,
            "category": "vegetables",
        }
        body.update(overrides)
        return body

    def test_create(self, client, headers, supplier):
        response = client.post("/api/products", json=self._payload(), headers=headers(supplier))

        assert response.status_code == 201
        product = response.json()["data"]["product"]
        assert product["supplier_id"] == str(supplier.id)
        assert product["supplier_name"] == "Fresh Farms"
        assert product["min_order_quantity"] == 1

    @pytest.mark.parametrize("overrides, message", [
        ({"price": 0}, "Price must be greater than 0"),
        ({"price": -5}, "Price must be greater than 0"),
        ({"stock": -1}, "Stock cannot be negative"),
        ({"min_order_quantity": 0}, "Minimum order quantity must be at least 1"),
        ({"name": "  "}, "Name, price, unit, stock, and category are required"),
        ({"stock": None}, "Name, price, unit, stock, and category are required"),
    ])
    def test_create_validation(self, client, headers, supplier, overrides, message):
        response = client.post("/api/products", json=self._payload(**overrides),
                               headers=headers(supplier))
        assert response.status_code == 400
        assert response.json()["message"] == message

    def test_vendor_cannot_create(self, client, headers, vendor):
        response = client.post("/api/products", json=self._payload(), headers=headers(vendor))
        assert response.status_code == 403

    def test_update_by_owner(self, client, headers, supplier, make_product):
        onions = make_product(supplier)

        response = client.put(f"/api/products/{onions.id}",
                              json={"stock": 7, "price": "11.5"}, headers=headers(supplier))

        assert response.status_code == 200
        product = response.json()["data"]["product"]
        assert product["stock"] == 7
        assert product["price"] == 11.5
        assert product["name"] == "Onions"

    def test_update_validation(self, client, headers, supplier, make_product):
        onions = make_product(supplier)
        response = client.put(f"/api/products/{onions.id}", json={"price": 0},
                              headers=headers(supplier))
        assert response.status_code == 400
        assert response.json()["message"] == "Price must be greater than 0"

    def test_update_by_other_supplier_forbidden(self, client, headers, supplier, other_supplier,
                                                make_product):
        onions = make_product(supplier)
        response = client.put(f"/api/products/{onions.id}", json={"stock": 1},
                              headers=headers(other_supplier))
        assert response.status_code == 403

    def test_soft_delete(self, db, client, headers, supplier, make_product):
        onions = make_product(supplier)

        response = client.delete(f"/api/products/{onions.id}", headers=headers(supplier))

        assert response.status_code == 200
        assert response.json()["message"] == "Product deleted successfully"
        db.expire_all()
        assert db.get(Product, onions.id).is_active is False
        assert client.get(f"/api/products/{onions.id}").status_code == 404

    def test_delete_missing(self, client, headers, supplier):
        response = client.delete(f"/api/products/{'0' * 32}", headers=headers(supplier))
        assert response.status_code == 404
