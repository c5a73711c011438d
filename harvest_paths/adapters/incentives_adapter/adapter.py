from __future__ import annotations

from collections.abc import Callable
from typing import Any

from eth_utils import to_checksum_address

from harvest_paths.core.adapters.BaseAdapter import BaseAdapter, require_wallet
from harvest_paths.core.constants.base import ADAPTER_INCENTIVES
from harvest_paths.core.constants.silo_abi import INCENTIVES_CONTROLLER_ABI
from harvest_paths.core.utils import web3 as web3_utils
from harvest_paths.core.utils.transaction import encode_call, send_transaction


class IncentivesControllerAdapter(BaseAdapter):
    """Reads and claims rewards accrued by share-token holders."""

    adapter_type = ADAPTER_INCENTIVES

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        controller_address: str,
        chain_id: int,
        signing_callback: Callable | None = None,
    ) -> None:
        super().__init__(
            "incentives_adapter",
            config,
            chain_id=chain_id,
            signing_callback=signing_callback,
        )
        self.controller_address = to_checksum_address(controller_address)
        self._reward_token: str | None = None

    async def reward_token(self) -> str:
        if self._reward_token:
            return self._reward_token
        async with web3_utils.web3_from_chain_id(self.chain_id) as web3:
            controller = web3.eth.contract(
                address=self.controller_address, abi=INCENTIVES_CONTROLLER_ABI
            )
            token = await controller.functions.REWARD_TOKEN().call()
        self._reward_token = to_checksum_address(str(token))
        return self._reward_token

    async def get_rewards_balance(self, assets: list[str], holder: str) -> int:
        async with web3_utils.web3_from_chain_id(self.chain_id) as web3:
            controller = web3.eth.contract(
                address=self.controller_address, abi=INCENTIVES_CONTROLLER_ABI
            )
            balance = await controller.functions.getRewardsBalance(
                [to_checksum_address(a) for a in assets],
                to_checksum_address(holder),
            ).call(block_identifier="pending")
        return int(balance)

    @require_wallet
    async def claim_rewards(self, assets: list[str], amount: int, to: str) -> str:
        tx = await encode_call(
            target=self.controller_address,
            abi=INCENTIVES_CONTROLLER_ABI,
            fn_name="claimRewards",
            args=[
                [to_checksum_address(a) for a in assets],
                int(amount),
                to_checksum_address(to),
            ],
            from_address=self.wallet_address,
            chain_id=self.chain_id,
        )
        txn_hash = await send_transaction(tx, self.signing_callback)
        self.logger.info(f"Claimed rewards for {len(assets)} asset(s) to {to}")
        return txn_hash
