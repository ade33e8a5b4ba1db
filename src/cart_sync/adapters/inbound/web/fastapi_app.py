from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from returns.result import Failure, Result

from cart_sync.core.domain.model.errors import (
    CartSyncError,
    CheckoutIncomplete,
    InvalidTrigger,
    TransportError,
)
from cart_sync.core.domain.model.state import ObservableState
from cart_sync.core.ports.inbound.cart_actions import (
    Action,
    ActionTrigger,
    CartActionsUseCase,
)

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class ItemOut(BaseModel):
    id: int
    content: str
    amount: int


class StateResponse(BaseModel):
    inventory: list[ItemOut]
    cart: list[ItemOut]


class AdjustRequest(BaseModel):
    delta: int = Field(examples=[-1])


class ErrorResponse(BaseModel):
    type: str
    message: str
    details: list[dict[str, Any]] | None = None


def _snapshot(state: ObservableState) -> StateResponse:
    return StateResponse(
        inventory=[
            ItemOut(id=it.item_id, content=it.content, amount=it.amount)
            for it in state.inventory
        ],
        cart=[
            ItemOut(id=it.item_id, content=it.content, amount=it.amount)
            for it in state.cart
        ],
    )


def _map_error_to_http(err: CartSyncError) -> tuple[int, ErrorResponse]:
    if isinstance(err, InvalidTrigger):
        return 400, ErrorResponse(type=type(err).__name__, message=str(err))

    if isinstance(err, CheckoutIncomplete):
        return 409, ErrorResponse(
            type=type(err).__name__,
            message=str(err),
            details=[{"failed_ids": list(err.failed_ids)}],
        )

    if isinstance(err, TransportError):
        return 503, ErrorResponse(type=type(err).__name__, message=str(err))

    # RequestFailed / MalformedResponse: ストア側の問題
    return 502, ErrorResponse(type=type(err).__name__, message=str(err))


def create_app(
    usecase: CartActionsUseCase,
    state: ObservableState,
    on_shutdown: Callable[[], Awaitable[None]] | None = None,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        # 初期化に失敗しても起動は続ける（reporter に記録済み、/refresh で再取得できる）
        await usecase.initialize()
        yield
        if on_shutdown is not None:
            await on_shutdown()

    app = FastAPI(title="cart_sync", lifespan=lifespan)

    # --- exception handlers (統一エラー応答) ---------------------------------

    @app.exception_handler(CartSyncError)
    async def handle_sync_error(_: Request, exc: CartSyncError) -> JSONResponse:
        status, body = _map_error_to_http(exc)
        return JSONResponse(status_code=status, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=[{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()],
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    async def run(trigger: ActionTrigger) -> StateResponse:
        result: Result[None, CartSyncError] = await usecase.dispatch(trigger)
        if isinstance(result, Failure):
            raise result.failure()
        return _snapshot(state)

    # --- routes --------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/state", response_model=StateResponse)
    def get_state() -> Any:
        return _snapshot(state)

    @app.post("/inventory/{item_id}/increment", response_model=StateResponse)
    async def increment(item_id: int) -> Any:
        return await run(ActionTrigger(Action.INCREMENT, item_id=item_id))

    @app.post("/inventory/{item_id}/decrement", response_model=StateResponse)
    async def decrement(item_id: int) -> Any:
        return await run(ActionTrigger(Action.DECREMENT, item_id=item_id))

    @app.post("/inventory/{item_id}/adjust", response_model=StateResponse)
    async def adjust(item_id: int, req: AdjustRequest) -> Any:
        return await run(ActionTrigger(Action.ADJUST, item_id=item_id, delta=req.delta))

    @app.post(
        "/cart/{item_id}",
        response_model=StateResponse,
        responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    )
    async def add_to_cart(item_id: int) -> Any:
        return await run(ActionTrigger(Action.ADD_TO_CART, item_id=item_id))

    @app.delete(
        "/cart/{item_id}",
        response_model=StateResponse,
        responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    )
    async def delete_from_cart(item_id: int) -> Any:
        return await run(ActionTrigger(Action.DELETE_FROM_CART, item_id=item_id))

    @app.post(
        "/checkout",
        response_model=StateResponse,
        responses={409: {"model": ErrorResponse}},
    )
    async def checkout() -> Any:
        return await run(ActionTrigger(Action.CHECKOUT))

    @app.post("/refresh", response_model=StateResponse)
    async def refresh() -> Any:
        return await run(ActionTrigger(Action.REFRESH))

    return app
