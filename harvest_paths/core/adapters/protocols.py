from __future__ import annotations

from typing import Protocol

from harvest_paths.core.adapters.models import AssetStorage, AuctionInfo


class TokenProtocol(Protocol):
    async def balance_of(self, token: str, holder: str) -> int: ...

    async def total_supply(self, token: str) -> int: ...


class YieldSourceProtocol(Protocol):
    async def deposit(
        self, asset: str, amount: int, *, collateral_only: bool = False
    ) -> str: ...

    async def withdraw(
        self, asset: str, amount: int, *, collateral_only: bool = False
    ) -> str: ...

    async def asset_storage(self, asset: str) -> AssetStorage: ...


class IncentivesControllerProtocol(Protocol):
    async def reward_token(self) -> str: ...

    async def get_rewards_balance(self, assets: list[str], holder: str) -> int: ...

    async def claim_rewards(self, assets: list[str], amount: int, to: str) -> str: ...


class AuctionProtocol(Protocol):
    async def get_auction_id(self, from_token: str, to_token: str) -> bytes: ...

    async def auction_info(self, auction_id: bytes) -> AuctionInfo: ...

    async def auction_length(self) -> int: ...

    async def latest_timestamp(self) -> int: ...

    async def enable(self, from_token: str, to_token: str) -> str: ...

    async def kick(self, auction_id: bytes) -> str: ...

    async def set_hook_flags(
        self, kickable: bool, kick: bool, pre_take: bool, post_take: bool
    ) -> str: ...

    async def approve(self, token: str) -> str | None: ...
