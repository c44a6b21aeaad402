"""Pre-checkout cart rules."""

from decimal import Decimal

from vendor_client.cart import CartItem
from vendor_client.cart_validator import SAME_SUPPLIER_MESSAGE, validate_cart


def _item(name="Onions", supplier_id="s1", quantity=2, min_order_quantity=1):
    return CartItem(product_id=name.lower(), name=name, price=Decimal("10"), quantity=quantity,
                    min_order_quantity=min_order_quantity, supplier_id=supplier_id, stock=50)


class TestValidateCart:
    def test_empty_cart_is_valid(self):
        assert validate_cart([]) == (True, None)

    def test_single_supplier_cart_is_valid(self):
        result = validate_cart([_item("Onions"), _item("Garlic")])
        assert result.valid is True
        assert result.error is None

    def test_mixed_suppliers_rejected(self):
        result = validate_cart([_item("Onions", "s1"), _item("Cumin", "s2")])
        assert result.valid is False
        assert result.error == SAME_SUPPLIER_MESSAGE
        assert result.error == "All items in cart must be from the same supplier."

    def test_minimum_quantity_names_first_offender(self):
        result = validate_cart([
            _item("Onions", quantity=1, min_order_quantity=1),
            _item("Garlic", quantity=1, min_order_quantity=3),
            _item("Ginger", quantity=0, min_order_quantity=2),
        ])
        assert result == (False, "Minimum order quantity for Garlic is 3")

    def test_supplier_rule_checked_before_minimum(self):
        result = validate_cart([
            _item("Onions", "s1", quantity=0, min_order_quantity=5),
            _item("Cumin", "s2"),
        ])
        assert result.error == SAME_SUPPLIER_MESSAGE
