from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple, Type

import pytest

from cart_sync.core.domain.model.errors import CartSyncError
from cart_sync.core.domain.model.item import CartItem, InventoryItem
from cart_sync.core.domain.model.state import ObservableState
from cart_sync.core.domain.service.reconciliation_service import (
    ReconciliationDeps,
    ReconciliationService,
)
from fakes import InMemoryCartStore


@dataclass
class RecordingReporter:
    reports: List[Tuple[str, CartSyncError]] = field(default_factory=list)

    def report(self, operation: str, error: CartSyncError) -> None:
        self.reports.append((operation, error))


@dataclass
class Harness:
    service: ReconciliationService
    state: ObservableState
    store: InMemoryCartStore
    reporter: RecordingReporter
    # 通知ごとの (inventory, cart) スナップショット
    notifications: List[tuple] = field(default_factory=list)


@pytest.fixture
def make_harness() -> Callable[..., Harness]:
    def _make(
        inventory: Sequence[InventoryItem] = (),
        cart: Sequence[CartItem] = (),
        store_cls: Type[InMemoryCartStore] = InMemoryCartStore,
    ) -> Harness:
        store = store_cls.seeded(inventory=inventory, cart=cart)
        state = ObservableState()
        reporter = RecordingReporter()
        service = ReconciliationService(
            ReconciliationDeps(store=store, state=state, reporter=reporter)
        )
        h = Harness(service=service, state=state, store=store, reporter=reporter)
        state.subscribe(lambda: h.notifications.append((state.inventory, state.cart)))
        return h

    return _make
