from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from cart_sync.core.domain.model.errors import CartSyncError
from cart_sync.core.domain.model.item import CartItem, InventoryItem, ItemId


class CartStoreGateway(Protocol):
    """
    リモートストアへの唯一の窓口。各メソッドは 1 回の往復で必ず決着する。
    リトライ・キャッシュはしない。
    """

    async def fetch_inventory(
        self,
    ) -> Result[Sequence[InventoryItem], CartSyncError]: ...

    async def fetch_cart(self) -> Result[Sequence[CartItem], CartSyncError]: ...

    async def create_cart_record(
        self, item: CartItem
    ) -> Result[CartItem, CartSyncError]: ...

    async def amend_cart_record(
        self, item_id: ItemId, new_amount: int
    ) -> Result[CartItem, CartSyncError]: ...

    async def delete_cart_record(
        self, item_id: ItemId
    ) -> Result[None, CartSyncError]: ...
