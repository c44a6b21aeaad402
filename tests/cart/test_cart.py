"""Client-local cart persisted as JSON."""

import json
from decimal import Decimal

import pytest

from vendor_client.cart import Cart


def _product(name="Onions", price="12.50", supplier_id="s1", min_order_quantity=1):
    return {
        "id": f"id-{name.lower()}",
        "name": name,
        "price": price,
        "unit": "kg",
        "stock": 40,
        "min_order_quantity": min_order_quantity,
        "supplier_id": supplier_id,
        "supplier_name": "Fresh Farms",
    }


@pytest.fixture
def cart_path(tmp_path):
    return str(tmp_path / "cart.json")


class TestCart:
    def test_add_merges_existing_line(self, cart_path):
        cart = Cart(cart_path)
        cart.add_to_cart(_product(), 2)
        cart.add_to_cart(_product(), 3)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.get_cart_count() == 5
        assert cart.get_cart_total() == Decimal("62.50")

    def test_persists_across_instances(self, cart_path):
        cart = Cart(cart_path)
        cart.add_to_cart(_product("Onions"), 2)
        cart.add_to_cart(_product("Garlic", price="40"), 1)

        reloaded = Cart(cart_path)

        assert [i.name for i in reloaded.items] == ["Onions", "Garlic"]
        assert reloaded.get_cart_total() == Decimal("65.00")

    def test_update_and_remove(self, cart_path):
        cart = Cart(cart_path)
        cart.add_to_cart(_product("Onions"), 2)
        cart.add_to_cart(_product("Garlic"), 1)

        cart.update_quantity("id-onions", 7)
        cart.update_quantity("id-garlic", 0)

        reloaded = Cart(cart_path)
        assert [(i.name, i.quantity) for i in reloaded.items] == [("Onions", 7)]

        reloaded.remove_from_cart("id-onions")
        assert Cart(cart_path).items == []

    def test_clear(self, cart_path):
        cart = Cart(cart_path)
        cart.add_to_cart(_product(), 2)
        cart.clear_cart()
        assert Cart(cart_path).get_cart_count() == 0

    def test_corrupt_file_starts_empty(self, cart_path):
        with open(cart_path, "w", encoding="utf-8") as f:
            f.write("{not json")

        cart = Cart(cart_path)

        assert cart.items == []
        cart.add_to_cart(_product(), 1)
        with open(cart_path, encoding="utf-8") as f:
            assert len(json.load(f)) == 1

    def test_validate_uses_cart_rules(self, cart_path):
        cart = Cart(cart_path)
        cart.add_to_cart(_product("Onions", supplier_id="s1"), 1)
        cart.add_to_cart(_product("Cumin", supplier_id="s2"), 1)

        assert cart.validate().valid is False
