import json

import httpx
import pytest

from client import StorefrontClient

PRODUCTS = [
    {"id": 1, "title": "Biba Embroidered Kurta", "price": 1299},
    {"id": 2, "title": "Classic Men's Shirt", "price": 999},
]


def make_client(handler):
    navigated, notices = [], []
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://shop.test")
    storefront = StorefrontClient(navigate=navigated.append, notify=notices.append, http_client=http)
    return storefront, navigated, notices


def test_add_to_cart_upserts_by_id():
    storefront = StorefrontClient(navigate=lambda url: None, notify=lambda msg: None)
    storefront.add_to_cart(PRODUCTS[0])
    storefront.add_to_cart(PRODUCTS[1])
    storefront.add_to_cart(PRODUCTS[0])

    assert [(item.id, item.quantity) for item in storefront.cart] == [(1, 2), (2, 1)]
    assert storefront.cart_total() == 1299 * 2 + 999


@pytest.mark.asyncio
async def test_load_catalog():
    def handler(request):
        assert request.url.path == "/api/products"
        return httpx.Response(200, json={"products": PRODUCTS})

    storefront, _, _ = make_client(handler)
    assert await storefront.load_catalog() == PRODUCTS
    assert storefront.products == PRODUCTS
    await storefront.aclose()


@pytest.mark.asyncio
async def test_checkout_posts_cart_and_navigates():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"url": "https://checkout.stripe.com/c/pay/cs_test_1"})

    storefront, navigated, notices = make_client(handler)
    storefront.add_to_cart(PRODUCTS[0])
    storefront.add_to_cart(PRODUCTS[0])

    url = await storefront.checkout()

    assert url == "https://checkout.stripe.com/c/pay/cs_test_1"
    assert navigated == [url]
    assert notices == []
    assert seen["path"] == "/api/create-checkout-session"
    assert seen["body"] == {
        "items": [{"id": 1, "title": "Biba Embroidered Kurta", "price": 1299, "quantity": 2}]
    }
    await storefront.aclose()


@pytest.mark.asyncio
async def test_checkout_with_empty_cart_does_not_call_server():
    def handler(request):
        raise AssertionError("server should not be called")

    storefront, navigated, notices = make_client(handler)
    assert await storefront.checkout() is None
    assert notices == ["Cart empty"]
    assert navigated == []
    await storefront.aclose()


@pytest.mark.asyncio
async def test_checkout_error_is_reported():
    def handler(request):
        return httpx.Response(500, json={"error": "Stripe not configured on server. Set STRIPE_SECRET_KEY."})

    storefront, navigated, notices = make_client(handler)
    storefront.add_to_cart(PRODUCTS[1])

    assert await storefront.checkout() is None
    assert notices == ["Error creating checkout session: Stripe not configured on server. Set STRIPE_SECRET_KEY."]
    assert navigated == []
    await storefront.aclose()


@pytest.mark.asyncio
async def test_checkout_non_json_response_is_unknown_error():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    storefront, navigated, notices = make_client(handler)
    storefront.add_to_cart(PRODUCTS[1])

    assert await storefront.checkout() is None
    assert notices == ["Error creating checkout session: unknown"]
    assert navigated == []
    await storefront.aclose()


@pytest.mark.asyncio
async def test_checkout_unreachable_server_is_reported():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    storefront, navigated, notices = make_client(handler)
    storefront.add_to_cart(PRODUCTS[0])

    assert await storefront.checkout() is None
    assert notices == ["Error creating checkout session: Connection refused"]
    assert navigated == []
    await storefront.aclose()
