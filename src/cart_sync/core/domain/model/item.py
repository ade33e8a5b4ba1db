from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Tuple, TypeVar

ItemId = int


@dataclass(frozen=True)
class InventoryItem:
    item_id: ItemId
    content: str
    amount: int = 0

    def adjusted(self, delta: int) -> "InventoryItem":
        # 在庫数は 0 未満にしない
        return replace(self, amount=max(0, self.amount + delta))


@dataclass(frozen=True)
class CartItem:
    item_id: ItemId
    content: str
    amount: int

    @staticmethod
    def from_inventory(item: InventoryItem) -> "CartItem":
        return CartItem(item_id=item.item_id, content=item.content, amount=item.amount)


Item = TypeVar("Item", InventoryItem, CartItem)


def find_item(items: Iterable[Item], item_id: ItemId) -> Item | None:
    for it in items:
        if it.item_id == item_id:
            return it
    return None


def replace_item(items: Iterable[Item], new: Item) -> Tuple[Item, ...]:
    return tuple(new if it.item_id == new.item_id else it for it in items)


def without_item(items: Iterable[Item], item_id: ItemId) -> Tuple[Item, ...]:
    return tuple(it for it in items if it.item_id != item_id)
