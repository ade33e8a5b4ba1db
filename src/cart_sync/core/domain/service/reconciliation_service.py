from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Sequence

from returns.result import Failure, Result, Success

from cart_sync.core.domain.model.errors import (
    CartSyncError,
    CheckoutIncomplete,
    InvalidTrigger,
)
from cart_sync.core.domain.model.item import (
    CartItem,
    InventoryItem,
    ItemId,
    find_item,
    replace_item,
    without_item,
)
from cart_sync.core.domain.model.state import ObservableState
from cart_sync.core.ports.inbound.cart_actions import (
    Action,
    ActionTrigger,
    CartActionsUseCase,
)
from cart_sync.core.ports.outbound.reporting import ErrorReporter
from cart_sync.core.ports.outbound.store import CartStoreGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationDeps:
    store: CartStoreGateway
    state: ObservableState
    reporter: ErrorReporter


@dataclass(frozen=True)
class ReconciliationService(CartActionsUseCase):
    """
    state を書き換える唯一のコンポーネント。

    ネットワーク呼び出しが成功したあとにだけローカル state を差し替える。
    失敗は reporter に渡して Failure を返す（例外は投げない）。
    """

    deps: ReconciliationDeps

    # ---- startup / refresh -------------------------------------------------

    async def initialize(self) -> Result[None, CartSyncError]:
        inventory, cart = await asyncio.gather(
            self.deps.store.fetch_inventory(), self.deps.store.fetch_cart()
        )
        errors = [r.failure() for r in (inventory, cart) if isinstance(r, Failure)]
        if errors:
            # 片方でも失敗したら state はそのまま（自動リトライはしない）
            for err in errors:
                self.deps.reporter.report("initialize", err)
            return Failure(errors[0])

        self.deps.state.set_inventory(inventory.unwrap())
        self.deps.state.set_cart(cart.unwrap())
        logger.info(
            "initialized: inventory=%d cart=%d",
            len(self.deps.state.inventory),
            len(self.deps.state.cart),
        )
        return Success(None)

    # ---- local quantity ----------------------------------------------------

    def adjust_quantity(self, item_id: ItemId, delta: int) -> None:
        inventory = self.deps.state.inventory
        if find_item(inventory, item_id) is None:
            return
        self.deps.state.set_inventory(
            it.adjusted(delta) if it.item_id == item_id else it for it in inventory
        )

    def increment(self, item_id: ItemId) -> None:
        self.adjust_quantity(item_id, 1)

    def decrement(self, item_id: ItemId) -> None:
        self.adjust_quantity(item_id, -1)

    # ---- remote-backed -----------------------------------------------------

    async def add_to_cart(self, item_id: ItemId) -> Result[None, CartSyncError]:
        item = find_item(self.deps.state.inventory, item_id)
        if item is None or item.amount <= 0:
            return Success(None)

        existing = find_item(self.deps.state.cart, item_id)
        if existing is not None:
            return await self._merge(item, existing)
        return await self._create(item)

    async def _merge(
        self, item: InventoryItem, existing: CartItem
    ) -> Result[None, CartSyncError]:
        result = await self.deps.store.amend_cart_record(
            item.item_id, existing.amount + item.amount
        )
        if isinstance(result, Failure):
            return self._report("add_to_cart", result.failure())

        # カート更新 → 在庫減算 の順。amend 成功前には在庫を触らない
        self.deps.state.set_cart(replace_item(self.deps.state.cart, result.unwrap()))
        self.adjust_quantity(item.item_id, -item.amount)
        logger.debug("merged %d unit(s) into cart item %s", item.amount, item.item_id)
        return Success(None)

    async def _create(self, item: InventoryItem) -> Result[None, CartSyncError]:
        result = await self.deps.store.create_cart_record(CartItem.from_inventory(item))
        if isinstance(result, Failure):
            return self._report("add_to_cart", result.failure())

        self.deps.state.set_cart((*self.deps.state.cart, result.unwrap()))
        self.adjust_quantity(item.item_id, -item.amount)
        logger.debug("created cart item %s with %d unit(s)", item.item_id, item.amount)
        return Success(None)

    async def delete_from_cart(self, item_id: ItemId) -> Result[None, CartSyncError]:
        result = await self.deps.store.delete_cart_record(item_id)
        if isinstance(result, Failure):
            return self._report("delete_from_cart", result.failure())

        self.deps.state.set_cart(without_item(self.deps.state.cart, item_id))
        return Success(None)

    async def checkout(self) -> Result[None, CartSyncError]:
        cart = self.deps.state.cart
        results: Sequence[Result[None, CartSyncError]] = await asyncio.gather(
            *(self.deps.store.delete_cart_record(it.item_id) for it in cart)
        )

        failed: list[ItemId] = []
        for it, r in zip(cart, results):
            if isinstance(r, Failure):
                failed.append(it.item_id)
                self._report("checkout", r.failure())

        # 1 件でも失敗したらローカルのカートは残す（リモートは部分的に消えていてもよい）
        if failed:
            return Failure(
                CheckoutIncomplete(
                    message=f"{len(failed)} of {len(cart)} cart record(s) not deleted",
                    failed_ids=tuple(failed),
                )
            )

        self.deps.state.set_cart(())
        logger.info("checkout completed: %d record(s) cleared", len(cart))
        return Success(None)

    # ---- trigger routing ---------------------------------------------------

    async def dispatch(self, trigger: ActionTrigger) -> Result[None, CartSyncError]:
        if trigger.action is Action.CHECKOUT:
            return await self.checkout()
        if trigger.action is Action.REFRESH:
            return await self.initialize()

        item_id = trigger.item_id
        if item_id is None:
            return Failure(
                InvalidTrigger(message=f"{trigger.action.value} requires an item id")
            )

        if trigger.action is Action.INCREMENT:
            self.increment(item_id)
        elif trigger.action is Action.DECREMENT:
            self.decrement(item_id)
        elif trigger.action is Action.ADJUST:
            self.adjust_quantity(item_id, trigger.delta)
        elif trigger.action is Action.ADD_TO_CART:
            return await self.add_to_cart(item_id)
        elif trigger.action is Action.DELETE_FROM_CART:
            return await self.delete_from_cart(item_id)
        return Success(None)

    def _report(
        self, operation: str, error: CartSyncError
    ) -> Result[None, CartSyncError]:
        self.deps.reporter.report(operation, error)
        return Failure(error)
