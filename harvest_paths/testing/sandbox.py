from dataclasses import dataclass

import pytest

from harvest_paths.core.access import AuthorizationContext
from harvest_paths.core.config import StrategyParams
from harvest_paths.core.strategies.Strategy import ShutdownGate
from harvest_paths.strategies.silo_auction_strategy.strategy import SiloAuctionStrategy
from harvest_paths.testing.simulated import (
    FakeClock,
    SimulatedAuction,
    SimulatedIncentivesController,
    SimulatedSilo,
    SimulatedTokens,
)

ASSET = "0x1111111111111111111111111111111111111111"
SHARE_TOKEN = "0x2222222222222222222222222222222222222222"
REWARD_TOKEN = "0x3333333333333333333333333333333333333333"
SILO = "0x4444444444444444444444444444444444444444"
INCENTIVES_CONTROLLER = "0x5555555555555555555555555555555555555555"
AUCTION = "0x6666666666666666666666666666666666666666"
STRATEGY = "0x7777777777777777777777777777777777777777"
MANAGEMENT = "0x8888888888888888888888888888888888888888"
KEEPER = "0x9999999999999999999999999999999999999999"
EMERGENCY_ADMIN = "0x1010101010101010101010101010101010101010"
OTHER_DEPOSITOR = "0x1212121212121212121212121212121212121212"
TAKER = "0x1313131313131313131313131313131313131313"

SANDBOX_CONFIG = {
    "strategy": {
        "chain_id": 1,
        "asset": ASSET,
        "silo": SILO,
        "share_token": SHARE_TOKEN,
        "incentives_controller": INCENTIVES_CONTROLLER,
        "reward_token": REWARD_TOKEN,
        "auction": AUCTION,
        "management": MANAGEMENT,
        "keepers": [KEEPER],
        "emergency_admin": EMERGENCY_ADMIN,
    },
    "strategy_wallet": {"address": STRATEGY},
}


@dataclass
class Sandbox:
    clock: FakeClock
    tokens: SimulatedTokens
    silo: SimulatedSilo
    incentives: SimulatedIncentivesController
    auction: SimulatedAuction
    gate: ShutdownGate

    def build_strategy(self, *, with_incentives: bool = True) -> SiloAuctionStrategy:
        config = {
            "strategy": dict(SANDBOX_CONFIG["strategy"]),
            "strategy_wallet": SANDBOX_CONFIG["strategy_wallet"],
        }
        if not with_incentives:
            config["strategy"]["incentives_controller"] = None
            config["strategy"]["reward_token"] = None
        strategy = SiloAuctionStrategy(
            StrategyParams.from_config(config),
            yield_source=self.silo,
            tokens=self.tokens,
            auction=self.auction,
            incentives=self.incentives if with_incentives else None,
            shutdown_gate=self.gate,
        )
        self.auction.hook_target = strategy
        return strategy

    async def auction_id(self) -> bytes:
        return await self.auction.get_auction_id(REWARD_TOKEN, ASSET)


@pytest.fixture
def sandbox():
    clock = FakeClock()
    tokens = SimulatedTokens()
    silo = SimulatedSilo(
        tokens,
        address=SILO,
        asset=ASSET,
        share_token=SHARE_TOKEN,
        wallet_address=STRATEGY,
    )
    # 1000 deposited against 1000 shares, half of them held by the strategy
    silo.seed(total_deposits=1000, holdings={STRATEGY: 500, OTHER_DEPOSITOR: 500})
    return Sandbox(
        clock=clock,
        tokens=tokens,
        silo=silo,
        incentives=SimulatedIncentivesController(
            tokens,
            address=INCENTIVES_CONTROLLER,
            reward_token=REWARD_TOKEN,
            wallet_address=STRATEGY,
        ),
        auction=SimulatedAuction(
            tokens, address=AUCTION, receiver=STRATEGY, clock=clock
        ),
        gate=ShutdownGate(),
    )


@pytest.fixture
async def strategy(sandbox):
    s = sandbox.build_strategy()
    await s.setup()
    return s


@pytest.fixture
def management_auth():
    return AuthorizationContext(MANAGEMENT)


@pytest.fixture
def keeper_auth():
    return AuthorizationContext(KEEPER)


@pytest.fixture
def auction_auth():
    return AuthorizationContext(AUCTION)
