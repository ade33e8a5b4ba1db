from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import httpx
from fastapi import FastAPI

from cart_sync.adapters.inbound.web.fastapi_app import create_app
from cart_sync.adapters.outbound.http_store import HttpCartStoreGateway
from cart_sync.adapters.outbound.logging_reporter import LoggingErrorReporter
from cart_sync.config import Settings
from cart_sync.core.domain.model.state import ObservableState
from cart_sync.core.domain.service.reconciliation_service import (
    ReconciliationDeps,
    ReconciliationService,
)

logger = logging.getLogger(__name__)

Render = Callable[[ObservableState], None]


@dataclass(frozen=True)
class CartClient:
    state: ObservableState
    actions: ReconciliationService
    http: httpx.AsyncClient

    async def aclose(self) -> None:
        await self.http.aclose()


def build_client(
    settings: Settings,
    on_change: Render,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CartClient:
    http = httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=settings.timeout_seconds,
        transport=transport,
    )
    state = ObservableState()
    # どのアクションよりも先に購読を張る
    state.subscribe(lambda: on_change(state))

    actions = ReconciliationService(
        ReconciliationDeps(
            store=HttpCartStoreGateway(http),
            state=state,
            reporter=LoggingErrorReporter(),
        )
    )
    return CartClient(state=state, actions=actions, http=http)


def _log_change(state: ObservableState) -> None:
    logger.debug(
        "state changed: inventory=%d cart=%d", len(state.inventory), len(state.cart)
    )


def build_app(settings: Settings) -> FastAPI:
    client = build_client(settings, on_change=_log_change)
    return create_app(client.actions, client.state, on_shutdown=client.aclose)


def create_asgi_app() -> FastAPI:
    return build_app(Settings.from_env())
