from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TypedDict

from loguru import logger

from harvest_paths.core.access import (
    AccessPolicy,
    AuthorizationContext,
    Role,
    requires_role,
)
from harvest_paths.core.config import StrategyParams
from harvest_paths.core.constants.base import MAX_UINT256


class StatusDict(TypedDict):
    total_assets: int
    position_value: int
    loose_balance: int
    share_balance: int
    pending_rewards: int
    auction_state: str | None
    hook_policy: str
    is_shutdown: bool


class ShutdownGate:
    """Wind-down switch owned by the outer ledger.

    Strategies only read it. Once set, no new funds are deployed; withdrawals
    and reporting keep working.
    """

    def __init__(self, shutdown: bool = False) -> None:
        self._shutdown = bool(shutdown)

    @property
    def is_shutdown(self) -> bool:
        return self._shutdown

    def shutdown(self) -> None:
        self._shutdown = True


class Strategy(ABC):
    """Single-asset strategy driven by an outer accounting ledger.

    The ledger calls ``deploy_funds``/``free_funds`` during its deposit and
    withdraw flows and ``harvest_and_report`` once per reporting cycle, using
    the returned figure to compute profit and loss.
    """

    name: str | None = None

    def __init__(
        self,
        params: StrategyParams,
        *,
        shutdown_gate: ShutdownGate | None = None,
        access_policy: AccessPolicy | None = None,
    ):
        self.params = params
        self.shutdown_gate = shutdown_gate or ShutdownGate()
        self.access_policy = access_policy or AccessPolicy.build(
            management=params.management,
            keepers=params.keepers,
            emergency_admin=params.emergency_admin,
            auction=params.auction,
        )
        self.logger = logger.bind(strategy=self.__class__.__name__)

    async def setup(self) -> None:
        pass

    @property
    def asset(self) -> str:
        return self.params.asset

    @property
    def is_shutdown(self) -> bool:
        return self.shutdown_gate.is_shutdown

    @abstractmethod
    async def deploy_funds(self, amount: int) -> None:
        pass

    @abstractmethod
    async def free_funds(self, amount: int) -> int:
        pass

    @abstractmethod
    async def harvest_and_report(self) -> int:
        pass

    async def available_deposit_limit(self) -> int:
        if self.is_shutdown:
            return 0
        return self.params.deposit_limit

    async def available_withdraw_limit(self) -> int:
        return MAX_UINT256

    @requires_role(Role.EMERGENCY_AUTHORIZED)
    async def emergency_withdraw(
        self, amount: int, *, auth: AuthorizationContext
    ) -> int:
        if not self.is_shutdown:
            raise RuntimeError("emergency_withdraw requires a shut down strategy")
        self.logger.warning(f"Emergency withdraw of {amount} by {auth.caller}")
        return await self._emergency_withdraw(int(amount))

    async def _emergency_withdraw(self, amount: int) -> int:
        return await self.free_funds(amount)

    @abstractmethod
    async def _status(self) -> StatusDict:
        pass

    async def status(self) -> StatusDict:
        return await self._status()
