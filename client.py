"""
Storefront client.

Holds the two pieces of client-side state, the catalog fetched once at
startup and the local cart, and drives checkout against the API. Navigation
and user notifications are callbacks so a UI (or a test) can plug in.
"""

from __future__ import annotations

import logging
import webbrowser
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)


@dataclass
class CartItem:
    id: Any
    title: str
    price: float
    quantity: int = 1

    def to_checkout_item(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "price": self.price, "quantity": self.quantity}


class StorefrontClient:
    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        navigate: Optional[Callable[[str], Any]] = None,
        notify: Optional[Callable[[str], Any]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: float = 20.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.navigate = navigate or webbrowser.open
        self.notify = notify or (lambda message: logger.warning(message))
        self._http = http_client
        self.timeout_seconds = timeout_seconds
        self.products: List[Dict[str, Any]] = []
        self.cart: List[CartItem] = []

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout_seconds)
        return self._http

    async def aclose(self) -> None:
        if self._http is not None:
            await self._http.aclose()

    async def load_catalog(self) -> List[Dict[str, Any]]:
        response = await self._client().get("/api/products")
        response.raise_for_status()
        self.products = response.json().get("products", [])
        return self.products

    def add_to_cart(self, product: Dict[str, Any]) -> CartItem:
        """Add one unit of ``product``; repeat adds bump the quantity."""
        for item in self.cart:
            if item.id == product["id"]:
                item.quantity += 1
                return item
        item = CartItem(id=product["id"], title=product["title"], price=product["price"])
        self.cart.append(item)
        return item

    def cart_total(self) -> float:
        return sum(item.price * item.quantity for item in self.cart)

    async def checkout(self) -> Optional[str]:
        """Start checkout and navigate to the provider page.

        Returns the redirect URL, or None after notifying the user of the failure.
        """
        if not self.cart:
            self.notify("Cart empty")
            return None

        payload = {"items": [item.to_checkout_item() for item in self.cart]}
        try:
            response = await self._client().post("/api/create-checkout-session", json=payload)
        except httpx.HTTPError as e:
            self.notify(f"Error creating checkout session: {e}")
            return None
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        url = data.get("url")
        if not url:
            self.notify(f"Error creating checkout session: {data.get('error') or 'unknown'}")
            return None

        self.navigate(url)
        return url
