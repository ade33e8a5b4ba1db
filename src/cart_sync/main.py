from __future__ import annotations

import asyncio
import logging
import sys

import uvicorn

from cart_sync.adapters.inbound.cli import USAGE, render, run_cli
from cart_sync.bootstrap import build_client
from cart_sync.config import Settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )


async def _interactive(settings: Settings) -> int:
    client = build_client(settings, on_change=lambda state: print(render(state)))
    print(USAGE)

    async def read_line() -> str:
        return await asyncio.to_thread(sys.stdin.readline)

    try:
        return await run_cli(client.actions, read_line)
    finally:
        await client.aclose()


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    if not argv:
        return asyncio.run(_interactive(settings))

    if argv == ["serve"]:
        uvicorn.run(
            "cart_sync.bootstrap:create_asgi_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            reload=False,
        )
        return 0

    print("usage: cart-sync [serve]")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
