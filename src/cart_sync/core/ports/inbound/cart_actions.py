from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from returns.result import Result

from cart_sync.core.domain.model.errors import CartSyncError
from cart_sync.core.domain.model.item import ItemId


class Action(str, Enum):
    INCREMENT = "increment"
    DECREMENT = "decrement"
    ADJUST = "adjust"
    ADD_TO_CART = "add_to_cart"
    DELETE_FROM_CART = "delete_from_cart"
    CHECKOUT = "checkout"
    REFRESH = "refresh"


@dataclass(frozen=True)
class ActionTrigger:
    action: Action
    item_id: ItemId | None = None
    delta: int = 0  # ADJUST のときだけ使う


class CartActionsUseCase(Protocol):
    async def initialize(self) -> Result[None, CartSyncError]: ...

    def adjust_quantity(self, item_id: ItemId, delta: int) -> None: ...

    def increment(self, item_id: ItemId) -> None: ...

    def decrement(self, item_id: ItemId) -> None: ...

    async def add_to_cart(self, item_id: ItemId) -> Result[None, CartSyncError]: ...

    async def delete_from_cart(
        self, item_id: ItemId
    ) -> Result[None, CartSyncError]: ...

    async def checkout(self) -> Result[None, CartSyncError]: ...

    async def dispatch(self, trigger: ActionTrigger) -> Result[None, CartSyncError]: ...
