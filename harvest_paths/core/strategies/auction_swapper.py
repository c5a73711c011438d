from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from harvest_paths.core.access import AuthorizationContext, Role, requires_role
from harvest_paths.core.constants.base import ZERO_ADDRESS

if TYPE_CHECKING:
    from harvest_paths.core.adapters.protocols import AuctionProtocol, TokenProtocol


class AuctionState(str, Enum):
    IDLE = "idle"
    KICKED = "kicked"
    SETTLED = "settled"
    EXPIRED = "expired"


class HookPolicy(str, Enum):
    """Which auction callbacks fire on this strategy.

    Kickable, kick and pre-take hooks are never used; the only choice is
    whether a fill triggers redeployment of loose asset.
    """

    NONE_ACTIVE = "none_active"
    POST_TAKE_REDEPLOY = "post_take_redeploy"

    @property
    def post_take(self) -> bool:
        return self is HookPolicy.POST_TAKE_REDEPLOY

    @property
    def flags(self) -> tuple[bool, bool, bool, bool]:
        # (kickable, kick, pre_take, post_take) as the auction expects them
        return (False, False, False, self.post_take)


class AuctionAlreadyKickedError(RuntimeError):
    def __init__(self, from_token: str, to_token: str):
        self.from_token = from_token
        self.to_token = to_token
        super().__init__(f"auction {from_token} -> {to_token} is already kicked")


class AuctionSwapperMixin:
    """Liquidates non-asset tokens through an external Dutch auction.

    Per (from, to) pair the auction moves IDLE -> KICKED -> SETTLED/EXPIRED and
    back to kickable. State is read from the auction each time it is needed;
    only the auction ids and the hook policy are kept locally.

    Hosts provide ``params``, ``logger``, ``access_policy``, ``tokens`` and
    ``deploy_funds``, and call ``_init_auction_swapper`` from ``__init__``.
    """

    auction: AuctionProtocol
    tokens: TokenProtocol

    def _init_auction_swapper(self, auction: AuctionProtocol) -> None:
        self.auction = auction
        self.hook_policy = HookPolicy.NONE_ACTIVE
        self._auction_ids: dict[tuple[str, str], bytes] = {}

    async def _auction_id(self, from_token: str, to_token: str) -> bytes:
        key = (from_token, to_token)
        if key not in self._auction_ids:
            self._auction_ids[key] = await self.auction.get_auction_id(
                from_token, to_token
            )
        return self._auction_ids[key]

    async def register_auction(self, from_token: str, to_token: str) -> bytes:
        """Enable the pair on the auction contract unless it already is."""
        if from_token == self.params.asset:
            raise ValueError("the strategy asset cannot be auctioned")

        auction_id = await self._auction_id(from_token, to_token)
        info = await self.auction.auction_info(auction_id)
        if info.from_token == ZERO_ADDRESS:
            await self.auction.enable(from_token, to_token)
            self.logger.info(f"Registered auction {from_token} -> {to_token}")
        await self.auction.approve(from_token)
        return auction_id

    async def auction_state(self, from_token: str, to_token: str) -> AuctionState:
        info = await self.auction.auction_info(
            await self._auction_id(from_token, to_token)
        )
        if info.kicked == 0:
            return AuctionState.IDLE
        # Block time decides liveness. Expired auctions report 0 available.
        length = await self.auction.auction_length()
        if await self.auction.latest_timestamp() > info.kicked + length:
            return AuctionState.EXPIRED
        if info.available == 0:
            return AuctionState.SETTLED
        return AuctionState.KICKED

    async def kickable(self, from_token: str) -> int:
        return await self.tokens.balance_of(from_token, self.params.strategy_address)

    async def enable_auction(self, from_token: str, to_token: str) -> int:
        """Kick the auction for ``from_token``; returns the amount put up for sale.

        Raises ``AuctionAlreadyKickedError`` while a previous kick is still
        live; errors from the auction itself propagate.
        """
        if from_token == self.params.asset:
            raise ValueError("the strategy asset cannot be auctioned")

        state = await self.auction_state(from_token, to_token)
        if state is AuctionState.KICKED:
            raise AuctionAlreadyKickedError(from_token, to_token)

        amount = await self.kickable(from_token)
        await self.auction.kick(await self._auction_id(from_token, to_token))
        self.logger.info(
            f"Kicked auction of {amount} {from_token} -> {to_token} (was {state.value})"
        )
        return amount

    @requires_role(Role.AUCTION)
    async def on_post_take(
        self,
        token: str,
        amount_taken: int,
        amount_paid: int,
        *,
        auth: AuthorizationContext,
    ) -> None:
        await self._post_take(token, amount_taken, amount_paid)

    async def _post_take(
        self, token: str, amount_taken: int, amount_paid: int
    ) -> None:
        # The fill amounts are ignored: everything loose goes back to work,
        # including asset that arrived for unrelated reasons.
        loose = await self.tokens.balance_of(
            self.params.asset, self.params.strategy_address
        )
        self.logger.debug(
            f"Post-take {token}: taken={amount_taken} paid={amount_paid} loose={loose}"
        )
        if loose > 0:
            await self.deploy_funds(loose)

    @requires_role(Role.MANAGEMENT)
    async def set_post_take_hook_flag(
        self, enabled: bool, *, auth: AuthorizationContext
    ) -> HookPolicy:
        policy = (
            HookPolicy.POST_TAKE_REDEPLOY if enabled else HookPolicy.NONE_ACTIVE
        )
        await self.auction.set_hook_flags(*policy.flags)
        self.hook_policy = policy
        self.logger.info(f"Hook policy set to {policy.value} by {auth.caller}")
        return policy
