from typing import NamedTuple, Optional, Sequence

SAME_SUPPLIER_MESSAGE = "All items in cart must be from the same supplier."


class CartValidation(NamedTuple):
    valid: bool
    error: Optional[str] = None


def validate_cart(items: Sequence) -> CartValidation:
    """Pre-checkout gate over the local cart snapshot.

    Rules short-circuit in order: an empty cart passes, every line must
    share one supplier, every line must meet its minimum order quantity.
    """
    if not items:
        return CartValidation(True)

    supplier_ids = {str(item.supplier_id) for item in items}
    if len(supplier_ids) > 1:
        return CartValidation(False, SAME_SUPPLIER_MESSAGE)

    for item in items:
        if item.quantity < item.min_order_quantity:
            return CartValidation(
                False,
                f"Minimum order quantity for {item.name} is {item.min_order_quantity}"
            )

    return CartValidation(True)
