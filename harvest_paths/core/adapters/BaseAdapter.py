from __future__ import annotations

import functools
from abc import ABC
from collections.abc import Callable
from typing import Any

from eth_utils import to_checksum_address
from loguru import logger


def require_wallet(fn: Callable) -> Callable:
    """Raise early if ``self.wallet_address`` is not set."""

    @functools.wraps(fn)
    async def wrapper(self: BaseAdapter, *args: Any, **kwargs: Any) -> Any:
        if not getattr(self, "wallet_address", None):
            raise ValueError("strategy wallet address not configured")
        return await fn(self, *args, **kwargs)

    return wrapper


class BaseAdapter(ABC):
    adapter_type: str | None = None

    def __init__(
        self,
        name: str,
        config: dict[str, Any] | None = None,
        *,
        chain_id: int,
        signing_callback: Callable | None = None,
    ):
        self.name = name
        self.config = config or {}
        self.chain_id = int(chain_id)
        self.signing_callback = signing_callback
        self.logger = logger.bind(adapter=self.__class__.__name__)

        strategy_addr = (self.config.get("strategy_wallet") or {}).get("address")
        self.wallet_address: str | None = (
            to_checksum_address(strategy_addr) if strategy_addr else None
        )

    async def close(self) -> None:
        pass
