from __future__ import annotations

import json

import httpx
import pytest
from returns.result import Failure, Success

from cart_sync.adapters.outbound.http_store import HttpCartStoreGateway
from cart_sync.core.domain.model.errors import (
    MalformedResponse,
    RequestFailed,
    TransportError,
)
from cart_sync.core.domain.model.item import CartItem, InventoryItem

BASE_URL = "http://store.test"


def _gateway(handler) -> HttpCartStoreGateway:
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return HttpCartStoreGateway(client)


@pytest.mark.asyncio
async def test_fetch_inventory_defaults_missing_amount_to_zero() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert (request.method, request.url.path) == ("GET", "/inventory")
        return httpx.Response(
            200,
            json=[
                {"id": 1, "content": "Apple", "amount": 2},
                {"id": 2, "content": "Pear"},
                {"id": 3, "content": "Plum", "amount": None},
            ],
        )

    result = await _gateway(handler).fetch_inventory()

    assert result == Success(
        (
            InventoryItem(1, "Apple", 2),
            InventoryItem(2, "Pear", 0),
            InventoryItem(3, "Plum", 0),
        )
    )


@pytest.mark.asyncio
async def test_fetch_cart() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/cart"
        return httpx.Response(200, json=[{"id": 2, "content": "Pear", "amount": 4}])

    result = await _gateway(handler).fetch_cart()

    assert result == Success((CartItem(2, "Pear", 4),))


@pytest.mark.asyncio
async def test_create_cart_record_posts_full_record() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, json=json.loads(request.content))

    result = await _gateway(handler).create_cart_record(CartItem(2, "Pear", 4))

    assert result == Success(CartItem(2, "Pear", 4))
    (req,) = seen
    assert (req.method, req.url.path) == ("POST", "/cart")
    assert json.loads(req.content) == {"id": 2, "content": "Pear", "amount": 4}


@pytest.mark.asyncio
async def test_amend_cart_record_sends_only_amount() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": 2, "content": "Pear", "amount": 6})

    result = await _gateway(handler).amend_cart_record(2, 6)

    assert result == Success(CartItem(2, "Pear", 6))
    (req,) = seen
    assert (req.method, req.url.path) == ("PATCH", "/cart/2")
    assert json.loads(req.content) == {"amount": 6}


@pytest.mark.asyncio
async def test_delete_cart_record_ignores_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert (request.method, request.url.path) == ("DELETE", "/cart/5")
        return httpx.Response(200, json={})

    assert await _gateway(handler).delete_cart_record(5) == Success(None)


@pytest.mark.asyncio
async def test_non_success_status_is_request_failed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={})

    result = await _gateway(handler).delete_cart_record(9)

    assert isinstance(result, Failure)
    err = result.failure()
    assert isinstance(err, RequestFailed)
    assert err.status == 404


@pytest.mark.asyncio
async def test_unreachable_store_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = await _gateway(handler).fetch_cart()

    assert isinstance(result, Failure)
    err = result.failure()
    assert isinstance(err, TransportError)
    assert "connection refused" in err.cause


@pytest.mark.asyncio
async def test_unexpected_body_is_malformed_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>not json</html>")

    result = await _gateway(handler).fetch_inventory()

    assert isinstance(result, Failure)
    assert isinstance(result.failure(), MalformedResponse)
