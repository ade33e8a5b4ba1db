from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from returns.result import Failure, Result, Success

from cart_sync.core.domain.model.errors import (
    CartSyncError,
    MalformedResponse,
    RequestFailed,
    TransportError,
)
from cart_sync.core.domain.model.item import CartItem, InventoryItem, ItemId
from cart_sync.core.ports.outbound.store import CartStoreGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ---- wire DTOs (adapter layer) ---------------------------------------------


class InventoryRecordIn(BaseModel):
    id: int
    content: str
    amount: int | None = None  # 未設定の在庫は 0 扱い

    def to_domain(self) -> InventoryItem:
        return InventoryItem(
            item_id=self.id, content=self.content, amount=self.amount or 0
        )


class CartRecordIn(BaseModel):
    id: int
    content: str
    amount: int

    def to_domain(self) -> CartItem:
        return CartItem(item_id=self.id, content=self.content, amount=self.amount)


class CartRecordOut(BaseModel):
    id: int
    content: str
    amount: int


class AmendCartOut(BaseModel):
    amount: int


_INVENTORY = TypeAdapter(list[InventoryRecordIn])
_CART = TypeAdapter(list[CartRecordIn])


# ---- gateway ---------------------------------------------------------------


@dataclass(frozen=True)
class HttpCartStoreGateway(CartStoreGateway):
    """json-server 互換の /inventory, /cart エンドポイントを叩く。"""

    client: httpx.AsyncClient

    async def fetch_inventory(self) -> Result[Sequence[InventoryItem], CartSyncError]:
        response = await self._send("GET", "/inventory")
        return response.bind(lambda r: _decode(r, _parse_inventory))

    async def fetch_cart(self) -> Result[Sequence[CartItem], CartSyncError]:
        response = await self._send("GET", "/cart")
        return response.bind(lambda r: _decode(r, _parse_cart))

    async def create_cart_record(self, item: CartItem) -> Result[CartItem, CartSyncError]:
        body = CartRecordOut(id=item.item_id, content=item.content, amount=item.amount)
        response = await self._send("POST", "/cart", body.model_dump())
        return response.bind(lambda r: _decode(r, _parse_cart_record))

    async def amend_cart_record(
        self, item_id: ItemId, new_amount: int
    ) -> Result[CartItem, CartSyncError]:
        # 送るのは新しい amount だけ
        body = AmendCartOut(amount=new_amount)
        response = await self._send("PATCH", f"/cart/{item_id}", body.model_dump())
        return response.bind(lambda r: _decode(r, _parse_cart_record))

    async def delete_cart_record(self, item_id: ItemId) -> Result[None, CartSyncError]:
        # レスポンスボディは使わない
        return (await self._send("DELETE", f"/cart/{item_id}")).map(lambda _: None)

    async def _send(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> Result[httpx.Response, CartSyncError]:
        logger.debug("%s %s", method, path)
        try:
            response = await self.client.request(method, path, json=payload)
        except httpx.RequestError as e:
            return Failure(
                TransportError(message=f"{method} {path} did not complete", cause=repr(e))
            )

        if not response.is_success:
            return Failure(
                RequestFailed(
                    message=f"{method} {path} returned {response.status_code}",
                    status=response.status_code,
                )
            )
        return Success(response)


def _decode(
    response: httpx.Response, parse: Callable[[bytes], T]
) -> Result[T, CartSyncError]:
    try:
        return Success(parse(response.content))
    except PydanticValidationError as e:
        return Failure(
            MalformedResponse(
                message=f"{response.request.method} {response.request.url.path}: "
                f"{e.error_count()} invalid field(s)"
            )
        )


def _parse_inventory(raw: bytes) -> tuple[InventoryItem, ...]:
    return tuple(x.to_domain() for x in _INVENTORY.validate_json(raw))


def _parse_cart(raw: bytes) -> tuple[CartItem, ...]:
    return tuple(x.to_domain() for x in _CART.validate_json(raw))


def _parse_cart_record(raw: bytes) -> CartItem:
    return CartRecordIn.model_validate_json(raw).to_domain()
