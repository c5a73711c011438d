from __future__ import annotations

from collections.abc import Callable
from typing import Any

from eth_utils import to_checksum_address

from harvest_paths.core.adapters.BaseAdapter import BaseAdapter, require_wallet
from harvest_paths.core.adapters.models import AssetStorage
from harvest_paths.core.constants.base import ADAPTER_SILO, MAX_UINT256
from harvest_paths.core.constants.silo_abi import ASSET_STORAGE_KEYS, SILO_ABI
from harvest_paths.core.utils import web3 as web3_utils
from harvest_paths.core.utils.tokens import ensure_allowance
from harvest_paths.core.utils.transaction import encode_call, send_transaction


def _asset_storage_from_raw(raw: Any) -> AssetStorage:
    if isinstance(raw, dict):
        row = dict(raw)
    else:
        row = dict(zip(ASSET_STORAGE_KEYS, raw, strict=False))
    return AssetStorage(
        collateral_token=to_checksum_address(str(row["collateralToken"])),
        collateral_only_token=to_checksum_address(str(row["collateralOnlyToken"])),
        debt_token=to_checksum_address(str(row["debtToken"])),
        total_deposits=int(row.get("totalDeposits") or 0),
        collateral_only_deposits=int(row.get("collateralOnlyDeposits") or 0),
        total_borrow_amount=int(row.get("totalBorrowAmount") or 0),
    )


class SiloAdapter(BaseAdapter):
    """Deposits into and withdraws from a single Silo market."""

    adapter_type = ADAPTER_SILO

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        silo_address: str,
        chain_id: int,
        signing_callback: Callable | None = None,
    ) -> None:
        super().__init__(
            "silo_adapter",
            config,
            chain_id=chain_id,
            signing_callback=signing_callback,
        )
        self.silo_address = to_checksum_address(silo_address)

    async def asset_storage(self, asset: str) -> AssetStorage:
        async with web3_utils.web3_from_chain_id(self.chain_id) as web3:
            silo = web3.eth.contract(address=self.silo_address, abi=SILO_ABI)
            raw = await silo.functions.assetStorage(to_checksum_address(asset)).call(
                block_identifier="pending"
            )
        return _asset_storage_from_raw(raw)

    @require_wallet
    async def deposit(
        self, asset: str, amount: int, *, collateral_only: bool = False
    ) -> str:
        amount = int(amount)
        if amount <= 0:
            raise ValueError("amount must be positive")

        asset = to_checksum_address(asset)
        await ensure_allowance(
            token_address=asset,
            owner=self.wallet_address,
            spender=self.silo_address,
            amount=amount,
            chain_id=self.chain_id,
            signing_callback=self.signing_callback,
            approval_amount=MAX_UINT256,
        )
        tx = await encode_call(
            target=self.silo_address,
            abi=SILO_ABI,
            fn_name="deposit",
            args=[asset, amount, bool(collateral_only)],
            from_address=self.wallet_address,
            chain_id=self.chain_id,
        )
        txn_hash = await send_transaction(tx, self.signing_callback)
        self.logger.info(f"Deposited {amount} of {asset} into {self.silo_address}")
        return txn_hash

    @require_wallet
    async def withdraw(
        self, asset: str, amount: int, *, collateral_only: bool = False
    ) -> str:
        amount = int(amount)
        if amount <= 0:
            raise ValueError("amount must be positive")

        asset = to_checksum_address(asset)
        tx = await encode_call(
            target=self.silo_address,
            abi=SILO_ABI,
            fn_name="withdraw",
            args=[asset, amount, bool(collateral_only)],
            from_address=self.wallet_address,
            chain_id=self.chain_id,
        )
        txn_hash = await send_transaction(tx, self.signing_callback)
        self.logger.info(f"Withdrew up to {amount} of {asset} from {self.silo_address}")
        return txn_hash
