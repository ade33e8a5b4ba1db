from __future__ import annotations

from typing import Protocol

from cart_sync.core.domain.model.errors import CartSyncError


class ErrorReporter(Protocol):
    def report(self, operation: str, error: CartSyncError) -> None: ...
