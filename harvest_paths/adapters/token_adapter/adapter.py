from collections.abc import Callable
from typing import Any

from harvest_paths.core.adapters.BaseAdapter import BaseAdapter
from harvest_paths.core.constants.base import ADAPTER_TOKEN
from harvest_paths.core.utils.tokens import get_token_balance, get_token_total_supply


class TokenAdapter(BaseAdapter):
    adapter_type: str = ADAPTER_TOKEN

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        chain_id: int,
        signing_callback: Callable | None = None,
    ):
        super().__init__(
            "token_adapter",
            config,
            chain_id=chain_id,
            signing_callback=signing_callback,
        )

    async def balance_of(self, token: str, holder: str) -> int:
        return await get_token_balance(token, self.chain_id, holder)

    async def total_supply(self, token: str) -> int:
        return await get_token_total_supply(token, self.chain_id)
