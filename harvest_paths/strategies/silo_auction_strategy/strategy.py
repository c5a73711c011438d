from __future__ import annotations

from collections.abc import Callable
from typing import Any

from harvest_paths.adapters.auction_adapter.adapter import AuctionAdapter
from harvest_paths.adapters.incentives_adapter.adapter import (
    IncentivesControllerAdapter,
)
from harvest_paths.adapters.silo_adapter.adapter import SiloAdapter
from harvest_paths.adapters.token_adapter.adapter import TokenAdapter
from harvest_paths.core.access import (
    AccessPolicy,
    AuthorizationContext,
    Role,
    requires_role,
)
from harvest_paths.core.adapters.protocols import (
    AuctionProtocol,
    IncentivesControllerProtocol,
    TokenProtocol,
    YieldSourceProtocol,
)
from harvest_paths.core.config import CONFIG, StrategyParams, set_rpc_urls
from harvest_paths.core.constants.base import MAX_UINT256
from harvest_paths.core.strategies.auction_swapper import (
    AuctionState,
    AuctionSwapperMixin,
)
from harvest_paths.core.strategies.Strategy import ShutdownGate, StatusDict, Strategy
from harvest_paths.core.utils.shares import to_amount
from harvest_paths.core.utils.transaction import local_sign_callback


class SiloAuctionStrategy(AuctionSwapperMixin, Strategy):
    """Lends the asset to a Silo and auctions its incentive rewards back into it.

    Total assets are always the floor-converted value of the held collateral
    shares plus whatever asset sits loose in the strategy wallet, read fresh
    from chain on every call.
    """

    name = "Silo Lender With Auctioned Rewards"

    def __init__(
        self,
        params: StrategyParams,
        *,
        yield_source: YieldSourceProtocol,
        tokens: TokenProtocol,
        auction: AuctionProtocol,
        incentives: IncentivesControllerProtocol | None = None,
        shutdown_gate: ShutdownGate | None = None,
        access_policy: AccessPolicy | None = None,
    ) -> None:
        super().__init__(
            params, shutdown_gate=shutdown_gate, access_policy=access_policy
        )
        if (incentives is None) != (params.incentives_controller is None):
            raise ValueError("incentives adapter does not match configuration")

        self.yield_source = yield_source
        self.tokens = tokens
        self.incentives = incentives
        self._init_auction_swapper(auction)

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any] | None = None,
        *,
        signing_callback: Callable | None = None,
        shutdown_gate: ShutdownGate | None = None,
    ) -> SiloAuctionStrategy:
        cfg = CONFIG if config is None else config
        params = StrategyParams.from_config(cfg)
        # Adapters resolve RPCs through the global config
        rpc_urls = (cfg.get("strategy") or {}).get("rpc_urls")
        if config is not None and rpc_urls:
            set_rpc_urls(rpc_urls)
        if signing_callback is None:
            wallet = cfg.get("strategy_wallet") or {}
            private_key = wallet.get("private_key") or wallet.get("private_key_hex")
            if private_key:
                signing_callback = local_sign_callback(private_key)

        adapter_config = {"strategy_wallet": {"address": params.strategy_address}}
        incentives = None
        if params.incentives_controller is not None:
            incentives = IncentivesControllerAdapter(
                adapter_config,
                controller_address=params.incentives_controller,
                chain_id=params.chain_id,
                signing_callback=signing_callback,
            )
        return cls(
            params,
            yield_source=SiloAdapter(
                adapter_config,
                silo_address=params.silo,
                chain_id=params.chain_id,
                signing_callback=signing_callback,
            ),
            tokens=TokenAdapter(adapter_config, chain_id=params.chain_id),
            auction=AuctionAdapter(
                adapter_config,
                auction_address=params.auction,
                chain_id=params.chain_id,
                signing_callback=signing_callback,
            ),
            incentives=incentives,
            shutdown_gate=shutdown_gate,
        )

    async def setup(self) -> None:
        storage = await self.yield_source.asset_storage(self.asset)
        if storage.collateral_token != self.params.share_token:
            raise ValueError(
                f"share token {self.params.share_token} is not the collateral "
                f"token {storage.collateral_token} of {self.params.silo}"
            )
        if self.incentives is not None and self.params.reward_token is not None:
            reward_token = await self.incentives.reward_token()
            if reward_token != self.params.reward_token:
                raise ValueError(
                    f"incentives controller pays {reward_token}, "
                    f"configured {self.params.reward_token}"
                )
            await self.register_auction(self.params.reward_token, self.asset)

    async def loose_balance(self) -> int:
        return await self.tokens.balance_of(self.asset, self.params.strategy_address)

    async def share_balance(self) -> int:
        return await self.tokens.balance_of(
            self.params.share_token, self.params.strategy_address
        )

    async def position_value(self) -> int:
        shares = await self.share_balance()
        if shares == 0:
            return 0
        storage = await self.yield_source.asset_storage(self.asset)
        supply = await self.tokens.total_supply(self.params.share_token)
        return to_amount(shares, storage.total_deposits, supply)

    async def total_assets(self) -> int:
        return await self.position_value() + await self.loose_balance()

    async def deploy_funds(self, amount: int) -> None:
        amount = int(amount)
        if self.is_shutdown:
            self.logger.debug(f"Shutdown: not deploying {amount}")
            return
        if amount <= 0:
            return
        await self.yield_source.deposit(self.asset, amount, collateral_only=False)
        self.logger.info(f"Deployed {amount} into {self.params.silo}")

    async def free_funds(self, amount: int) -> int:
        amount = int(amount)
        if amount <= 0:
            return 0
        before = await self.loose_balance()
        await self.yield_source.withdraw(self.asset, amount, collateral_only=False)
        freed = await self.loose_balance() - before
        if freed < amount:
            # Left for the ledger to book as a loss.
            self.logger.warning(f"Freed {freed} of {amount} requested")
        else:
            self.logger.info(f"Freed {freed} from {self.params.silo}")
        return freed

    async def claim_and_sell_rewards(self) -> None:
        if self.incentives is None:
            return

        assets = [self.params.share_token]
        holder = self.params.strategy_address
        pending = await self.incentives.get_rewards_balance(assets, holder)
        if pending == 0:
            self.logger.debug("No rewards to claim")
            return

        await self.incentives.claim_rewards(assets, MAX_UINT256, holder)
        self.logger.info(f"Claimed {pending} of {self.params.reward_token}")
        await self._kick_rewards()

    async def _kick_rewards(self) -> int:
        reward_token = self.params.reward_token
        if reward_token is None:
            return 0
        if await self.kickable(reward_token) == 0:
            return 0
        state = await self.auction_state(reward_token, self.asset)
        if state is AuctionState.KICKED:
            self.logger.warning(
                f"Auction for {reward_token} still live, rewards wait a cycle"
            )
            return 0
        return await self.enable_auction(reward_token, self.asset)

    @requires_role(Role.KEEPER)
    async def kick_rewards(self, *, auth: AuthorizationContext) -> int:
        return await self._kick_rewards()

    async def harvest_and_report(self) -> int:
        if not self.is_shutdown:
            await self.claim_and_sell_rewards()
            loose = await self.loose_balance()
            if loose > 0:
                await self.deploy_funds(loose)

        total = await self.total_assets()
        self.logger.info(f"Reported total assets {total}")
        return total

    async def available_withdraw_limit(self) -> int:
        storage = await self.yield_source.asset_storage(self.asset)
        return await self.loose_balance() + min(
            await self.position_value(), storage.liquidity
        )

    async def _emergency_withdraw(self, amount: int) -> int:
        return await self.free_funds(min(amount, await self.position_value()))

    async def _status(self) -> StatusDict:
        position_value = await self.position_value()
        loose = await self.loose_balance()
        reward_token = self.params.reward_token
        pending_rewards = 0
        auction_state = None
        if reward_token is not None:
            pending_rewards = await self.kickable(reward_token)
            auction_state = (await self.auction_state(reward_token, self.asset)).value
        return StatusDict(
            total_assets=position_value + loose,
            position_value=position_value,
            loose_balance=loose,
            share_balance=await self.share_balance(),
            pending_rewards=pending_rewards,
            auction_state=auction_state,
            hook_policy=self.hook_policy.value,
            is_shutdown=self.is_shutdown,
        )
