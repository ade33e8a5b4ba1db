from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartSyncError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class TransportError(CartSyncError):
    cause: str

    def __str__(self) -> str:  # pragma: no cover
        return f"transport_error: {self.cause} ({self.message})"


@dataclass(frozen=True)
class RequestFailed(CartSyncError):
    status: int

    def __str__(self) -> str:  # pragma: no cover
        return f"request_failed: status={self.status} ({self.message})"


@dataclass(frozen=True)
class MalformedResponse(CartSyncError):
    pass


@dataclass(frozen=True)
class CheckoutIncomplete(CartSyncError):
    failed_ids: tuple[int, ...]

    def __str__(self) -> str:  # pragma: no cover
        ids = ",".join(str(i) for i in self.failed_ids)
        return f"checkout_incomplete: failed_ids={ids} ({self.message})"


@dataclass(frozen=True)
class InvalidTrigger(CartSyncError):
    pass
