from __future__ import annotations

import logging
from dataclasses import dataclass

from cart_sync.core.domain.model.errors import CartSyncError
from cart_sync.core.ports.outbound.reporting import ErrorReporter


@dataclass(frozen=True)
class LoggingErrorReporter(ErrorReporter):
    logger_name: str = "cart_sync.errors"

    def report(self, operation: str, error: CartSyncError) -> None:
        logging.getLogger(self.logger_name).error(
            "%s failed: [%s] %s", operation, type(error).__name__, error
        )
