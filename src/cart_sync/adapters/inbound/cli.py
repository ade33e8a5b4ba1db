from __future__ import annotations

from typing import Awaitable, Callable

from returns.result import Failure

from cart_sync.core.domain.model.state import ObservableState
from cart_sync.core.ports.inbound.cart_actions import (
    Action,
    ActionTrigger,
    CartActionsUseCase,
)

USAGE = """commands:
  inc <id>             increase the quantity to add by one
  dec <id>             decrease the quantity to add by one
  adjust <id> <delta>  change the quantity to add by <delta>
  add <id>             move the selected quantity into the cart
  delete <id>          remove an item from the cart
  checkout             clear the cart
  refresh              reload inventory and cart from the store
  quit"""

_ITEM_COMMANDS = {
    "inc": Action.INCREMENT,
    "dec": Action.DECREMENT,
    "add": Action.ADD_TO_CART,
    "delete": Action.DELETE_FROM_CART,
}


def render(state: ObservableState) -> str:
    lines = ["Inventory:"]
    lines += [
        f"  [{it.item_id}] {it.content}  - {it.amount} +" for it in state.inventory
    ] or ["  (empty)"]
    lines.append("Cart:")
    lines += [
        f"  [{it.item_id}] {it.content} x {it.amount}" for it in state.cart
    ] or ["  (empty)"]
    return "\n".join(lines)


def parse_command(line: str) -> ActionTrigger:
    """
    line: 1 行のコマンド。
    Example:
      "add 3" -> ActionTrigger(Action.ADD_TO_CART, item_id=3)
    """
    parts = line.split()
    if not parts:
        raise ValueError("empty command")

    name, args = parts[0].lower(), parts[1:]
    if name in ("checkout", "refresh") and not args:
        return ActionTrigger(Action(name))

    if name in _ITEM_COMMANDS and len(args) == 1:
        return ActionTrigger(_ITEM_COMMANDS[name], item_id=_parse_int(args[0], "id"))

    if name == "adjust" and len(args) == 2:
        return ActionTrigger(
            Action.ADJUST,
            item_id=_parse_int(args[0], "id"),
            delta=_parse_int(args[1], "delta"),
        )

    raise ValueError(f"unknown command: {line.strip()!r}")


async def run_cli(
    usecase: CartActionsUseCase,
    read_line: Callable[[], Awaitable[str]],
    write: Callable[[str], None] = print,
) -> int:
    """state の描画は subscribe 済みのコールバックに任せる。ここは入力の解釈だけ。"""
    init = await usecase.initialize()
    if isinstance(init, Failure):
        write(f"[ng] {init.failure()}")

    while True:
        raw = await read_line()
        if not raw:  # EOF
            break
        line = raw.strip()
        if not line:
            continue
        if line in ("quit", "exit"):
            break
        if line == "help":
            write(USAGE)
            continue

        try:
            trigger = parse_command(line)
        except ValueError as e:
            write(f"invalid_input: {e}")
            continue

        result = await usecase.dispatch(trigger)
        if isinstance(result, Failure):
            write(f"[ng] {result.failure()}")

    return 0


def _parse_int(raw: str, what: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{what} must be an integer, got {raw!r}") from None
