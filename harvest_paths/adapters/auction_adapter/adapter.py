from __future__ import annotations

from collections.abc import Callable
from typing import Any

from eth_utils import to_checksum_address

from harvest_paths.core.adapters.BaseAdapter import BaseAdapter, require_wallet
from harvest_paths.core.adapters.models import AuctionInfo
from harvest_paths.core.constants.auction_abi import AUCTION_ABI, AUCTION_INFO_KEYS
from harvest_paths.core.constants.base import ADAPTER_AUCTION, MAX_UINT256
from harvest_paths.core.utils import web3 as web3_utils
from harvest_paths.core.utils.tokens import ensure_allowance
from harvest_paths.core.utils.transaction import encode_call, send_transaction


def _auction_info_from_raw(raw: Any) -> AuctionInfo:
    if isinstance(raw, dict):
        row = dict(raw)
    else:
        row = dict(zip(AUCTION_INFO_KEYS, raw, strict=False))
    return AuctionInfo(
        from_token=to_checksum_address(str(row["fromToken"])),
        to_token=to_checksum_address(str(row["toToken"])),
        kicked=int(row.get("kicked") or 0),
        available=int(row.get("available") or 0),
    )


class AuctionAdapter(BaseAdapter):
    """Controls the auction contract that liquidates reward tokens.

    Price decay and settlement happen inside the auction; this adapter only
    enables pairs, kicks them, reads their state and sets the hook flags.
    """

    adapter_type = ADAPTER_AUCTION

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        auction_address: str,
        chain_id: int,
        signing_callback: Callable | None = None,
    ) -> None:
        super().__init__(
            "auction_adapter",
            config,
            chain_id=chain_id,
            signing_callback=signing_callback,
        )
        self.auction_address = to_checksum_address(auction_address)

    async def _send(self, fn_name: str, args: list[Any]) -> str:
        tx = await encode_call(
            target=self.auction_address,
            abi=AUCTION_ABI,
            fn_name=fn_name,
            args=args,
            from_address=self.wallet_address,
            chain_id=self.chain_id,
        )
        return await send_transaction(tx, self.signing_callback)

    async def get_auction_id(self, from_token: str, to_token: str) -> bytes:
        async with web3_utils.web3_from_chain_id(self.chain_id) as web3:
            auction = web3.eth.contract(address=self.auction_address, abi=AUCTION_ABI)
            auction_id = await auction.functions.getAuctionId(
                to_checksum_address(from_token), to_checksum_address(to_token)
            ).call()
        return bytes(auction_id)

    async def auction_info(self, auction_id: bytes) -> AuctionInfo:
        async with web3_utils.web3_from_chain_id(self.chain_id) as web3:
            auction = web3.eth.contract(address=self.auction_address, abi=AUCTION_ABI)
            raw = await auction.functions.auctionInfo(auction_id).call(
                block_identifier="pending"
            )
        return _auction_info_from_raw(raw)

    async def auction_length(self) -> int:
        async with web3_utils.web3_from_chain_id(self.chain_id) as web3:
            auction = web3.eth.contract(address=self.auction_address, abi=AUCTION_ABI)
            return int(await auction.functions.auctionLength().call())

    async def latest_timestamp(self) -> int:
        """Timestamp of the latest block, the clock the auction itself uses."""
        async with web3_utils.web3_from_chain_id(self.chain_id) as web3:
            block = await web3.eth.get_block("latest")
        return int(block["timestamp"])

    @require_wallet
    async def enable(self, from_token: str, to_token: str) -> str:
        txn_hash = await self._send(
            "enable", [to_checksum_address(from_token), to_checksum_address(to_token)]
        )
        self.logger.info(f"Enabled auction {from_token} -> {to_token}")
        return txn_hash

    @require_wallet
    async def kick(self, auction_id: bytes) -> str:
        txn_hash = await self._send("kick", [auction_id])
        self.logger.info(f"Kicked auction 0x{auction_id.hex()}")
        return txn_hash

    @require_wallet
    async def set_hook_flags(
        self, kickable: bool, kick: bool, pre_take: bool, post_take: bool
    ) -> str:
        return await self._send(
            "setHookFlags",
            [bool(kickable), bool(kick), bool(pre_take), bool(post_take)],
        )

    @require_wallet
    async def approve(self, token: str) -> str | None:
        # The auction pulls the sold token from the strategy wallet on kick.
        return await ensure_allowance(
            token_address=to_checksum_address(token),
            owner=self.wallet_address,
            spender=self.auction_address,
            amount=MAX_UINT256,
            chain_id=self.chain_id,
            signing_callback=self.signing_callback,
        )
