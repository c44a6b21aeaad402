import json
import logging
import os
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ValidationError

from .cart_validator import CartValidation, validate_cart

logger = logging.getLogger(__name__)

DEFAULT_CART_PATH = os.path.join(
    os.path.expanduser("~"), ".bazaarbuddy", "cart.json")


class CartItem(BaseModel):
    product_id: str
    name: str
    price: Decimal
    unit: str = "kg"
    quantity: int
    min_order_quantity: int = 1
    stock: int = 0
    supplier_id: str
    supplier_name: Optional[str] = None

    @property
    def subtotal(self) -> Decimal:
        return self.price * self.quantity


class Cart:
    """Client-side cart persisted as JSON, rewritten after every change."""

    def __init__(self, path: str = DEFAULT_CART_PATH):
        self.path = path
        self.items: List[CartItem] = self._load()

    def _load(self) -> List[CartItem]:
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return [CartItem.model_validate(item) for item in raw]
        except (OSError, ValueError, TypeError, ValidationError):
            logger.warning("Discarding unreadable cart at %s",
                           self.path, exc_info=True)
            return []

    def _save(self):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([item.model_dump(mode="json")
                      for item in self.items], f, indent=2)

    def _find(self, product_id: str) -> Optional[CartItem]:
        return next((i for i in self.items if i.product_id == str(product_id)), None)

    def add_to_cart(self, product: dict, quantity: int = 1) -> CartItem:
        """Add a catalog product, merging into an existing line for it."""
        existing = self._find(product["id"])
        if existing:
            existing.quantity += quantity
        else:
            existing = CartItem(
                product_id=str(product["id"]),
                name=product["name"],
                price=product["price"],
                unit=product.get("unit", "kg"),
                quantity=quantity,
                min_order_quantity=product.get("min_order_quantity", 1),
                stock=product.get("stock", 0),
                supplier_id=str(product["supplier_id"]),
                supplier_name=product.get("supplier_name"),
            )
            self.items.append(existing)
        self._save()
        return existing

    def remove_from_cart(self, product_id: str):
        self.items = [i for i in self.items if i.product_id != str(product_id)]
        self._save()

    def update_quantity(self, product_id: str, quantity: int):
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return
        item = self._find(product_id)
        if item:
            item.quantity = quantity
            self._save()

    def clear_cart(self):
        self.items = []
        self._save()

    def get_cart_total(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0"))

    def get_cart_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def validate(self) -> CartValidation:
        return validate_cart(self.items)

    def to_order_items(self) -> List[dict]:
        return [{"product_id": i.product_id, "quantity": i.quantity} for i in self.items]
