from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:3000"


@dataclass(frozen=True)
class Settings:
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float | None = None  # None = タイムアウトなし
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @staticmethod
    def from_env() -> "Settings":
        load_dotenv()  # .env があれば読む（ローカル実行用）

        timeout = os.getenv("CART_SYNC_TIMEOUT")
        return Settings(
            base_url=os.getenv("CART_SYNC_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            timeout_seconds=float(timeout) if timeout else None,
            log_level=os.getenv("CART_SYNC_LOG_LEVEL", "INFO").upper(),
            host=os.getenv("CART_SYNC_HOST", "0.0.0.0"),
            port=int(os.getenv("CART_SYNC_PORT", "8000")),
        )
