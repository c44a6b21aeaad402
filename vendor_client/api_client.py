import logging
from typing import Optional
import requests

from .cart import Cart

logger = logging.getLogger(__name__)

DEFAULT_AUTH_URL = "http://localhost:8001"
DEFAULT_MARKETPLACE_URL = "http://localhost:8002"


class CartError(Exception):
    """The cart cannot be submitted as an order."""


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, data=None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.data = data


class MarketplaceClient:
    def __init__(self, auth_url: str = DEFAULT_AUTH_URL, marketplace_url: str = DEFAULT_MARKETPLACE_URL,
                 session: Optional[requests.Session] = None, timeout: float = 10):
        self.auth_url = auth_url.rstrip("/")
        self.marketplace_url = marketplace_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token: Optional[str] = None

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, url: str, **kwargs):
        response = self.session.request(
            method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = body.get("message") or response.reason or "Request failed"
            logger.warning("%s %s failed with %s: %s",
                           method, url, response.status_code, message)
            raise ApiError(response.status_code, message, body.get("data"))
        return body.get("data")

    def login(self, email: str, password: str) -> dict:
        data = self._request("POST", f"{self.auth_url}/api/auth/login",
                             json={"email": email, "password": password})
        self.token = data["token"]
        return data["user"]

    def list_products(self, **filters) -> dict:
        return self._request("GET", f"{self.marketplace_url}/api/products", params=filters)

    def place_order(self, cart: Cart, delivery_address: str, phone: str, notes: Optional[str] = None) -> dict:
        if not cart.items:
            raise CartError("Your cart is empty")

        check = cart.validate()
        if not check.valid:
            raise CartError(check.error)

        data = self._request("POST", f"{self.marketplace_url}/api/orders", json={
            "items": cart.to_order_items(),
            "delivery_address": delivery_address,
            "phone": phone,
            "notes": notes,
        })
        cart.clear_cart()
        logger.info("Placed order %s", data["order"]["order_number"])
        return data["order"]

    def list_orders(self, page: int = 1, limit: int = 10, status: Optional[str] = None) -> dict:
        params = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        return self._request("GET", f"{self.marketplace_url}/api/orders", params=params)

    def rate_order(self, order_id: str, rating: int, review: Optional[str] = None) -> dict:
        data = self._request("POST", f"{self.marketplace_url}/api/orders/{order_id}/rate",
                             json={"rating": rating, "review": review})
        return data["order"]
