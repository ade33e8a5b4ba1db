from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Tuple

from cart_sync.core.domain.model.item import CartItem, InventoryItem

OnChange = Callable[[], None]


@dataclass
class ObservableState:
    """
    inventory / cart の現在値と、変更通知先（1 つだけ）を保持する。

    setter は常に新しい tuple に差し替えてから同期的に通知する。
    I/O はしない。単一のイベントループからのみ触る前提（スレッドセーフではない）。
    """

    _inventory: Tuple[InventoryItem, ...] = ()
    _cart: Tuple[CartItem, ...] = ()
    _on_change: OnChange | None = field(default=None, repr=False)

    @property
    def inventory(self) -> Tuple[InventoryItem, ...]:
        return self._inventory

    @property
    def cart(self) -> Tuple[CartItem, ...]:
        return self._cart

    def set_inventory(self, items: Iterable[InventoryItem]) -> None:
        self._inventory = tuple(items)
        self._notify()

    def set_cart(self, items: Iterable[CartItem]) -> None:
        self._cart = tuple(items)
        self._notify()

    def subscribe(self, callback: OnChange) -> None:
        """後勝ち。複数購読は持たない。"""
        self._on_change = callback

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()
