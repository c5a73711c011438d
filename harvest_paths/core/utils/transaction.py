"""Build, sign and broadcast strategy transactions.

Every read that shapes a transaction (gas, nonce, fees) is fanned out over all
RPCs configured for the chain and the most conservative answer wins, so one
lagging node cannot underprice or under-nonce a send.
"""

import asyncio
import math
from collections.abc import Awaitable, Callable
from typing import Any

from eth_account import Account
from loguru import logger
from web3 import AsyncWeb3

from harvest_paths.core.constants.base import (
    DEFAULT_TRANSACTION_TIMEOUT,
    GAS_BUFFER_MULTIPLIER,
    MAX_BASE_FEE_GROWTH_MULTIPLIER,
    SUGGESTED_GAS_PRICE_MULTIPLIER,
    SUGGESTED_PRIORITY_FEE_MULTIPLIER,
)
from harvest_paths.core.constants.chains import PRE_EIP_1559_CHAIN_IDS
from harvest_paths.core.utils.web3 import (
    get_transaction_chain_id,
    web3_from_chain_id,
    web3s_from_chain_id,
)

SignCallback = Callable[[dict], Awaitable[bytes]]

_FEE_HISTORY_BLOCKS = 10
_FEE_HISTORY_PERCENTILE = 80


class TransactionRevertedError(RuntimeError):
    def __init__(
        self,
        txn_hash: str,
        receipt: dict[str, Any] | None = None,
        message: str | None = None,
    ):
        self.txn_hash = txn_hash
        self.receipt = receipt or {}
        super().__init__(message or f"Transaction reverted: {txn_hash}")

    @classmethod
    def with_gas_context(
        cls, txn_hash: str, receipt: dict[str, Any], transaction: dict
    ) -> "TransactionRevertedError":
        gas_used = int(receipt.get("gasUsed") or 0)
        gas_limit = int(transaction.get("gas") or 0)
        detail = ""
        if gas_used or gas_limit:
            detail = f" gasUsed={gas_used} gasLimit={gas_limit}"
            if gas_used and gas_limit and gas_used >= gas_limit:
                detail += " (likely out of gas)"
        return cls(
            txn_hash,
            receipt,
            message=f"Transaction reverted (status=0): {txn_hash}{detail}",
        )


def _prefixed(txn_hash: str) -> str:
    return txn_hash if txn_hash.startswith("0x") else f"0x{txn_hash}"


def _get_transaction_from_address(transaction: dict) -> str:
    if "from" not in transaction:
        raise ValueError("Transaction does not contain from address")
    return AsyncWeb3.to_checksum_address(transaction["from"])


async def _across_rpcs(chain_id: int, read: Callable[[AsyncWeb3], Awaitable[int]]):
    async with web3s_from_chain_id(chain_id) as web3s:
        return await asyncio.gather(*(read(w3) for w3 in web3s))


async def nonce_transaction(transaction: dict) -> dict:
    sender = _get_transaction_from_address(transaction)
    nonces = await _across_rpcs(
        get_transaction_chain_id(transaction),
        lambda w3: w3.eth.get_transaction_count(sender, block_identifier="pending"),
    )
    return {**transaction, "nonce": max(nonces)}


async def _priority_fee(w3: AsyncWeb3) -> int:
    history = await w3.eth.fee_history(
        _FEE_HISTORY_BLOCKS, "latest", [_FEE_HISTORY_PERCENTILE]
    )
    tips = [row[0] for row in history.reward]
    return sum(tips) // len(tips)


async def _base_fee(w3: AsyncWeb3) -> int:
    block = await w3.eth.get_block("latest")
    return block.baseFeePerGas


async def _gas_price(w3: AsyncWeb3) -> int:
    return await w3.eth.gas_price


async def gas_price_transaction(transaction: dict) -> dict:
    chain_id = get_transaction_chain_id(transaction)
    priced = dict(transaction)

    if chain_id in PRE_EIP_1559_CHAIN_IDS:
        gas_price = max(await _across_rpcs(chain_id, _gas_price))
        priced["gasPrice"] = int(gas_price * SUGGESTED_GAS_PRICE_MULTIPLIER)
        return priced

    base_fee = max(await _across_rpcs(chain_id, _base_fee))
    tip = max(await _across_rpcs(chain_id, _priority_fee))
    priced["maxPriorityFeePerGas"] = int(tip * SUGGESTED_PRIORITY_FEE_MULTIPLIER)
    priced["maxFeePerGas"] = int(
        base_fee * MAX_BASE_FEE_GROWTH_MULTIPLIER
        + tip * SUGGESTED_PRIORITY_FEE_MULTIPLIER
    )
    return priced


async def gas_limit_transaction(transaction: dict) -> dict:
    # A stale gas field would cap the estimate
    unbounded = {k: v for k, v in transaction.items() if k != "gas"}

    async def _estimate(w3: AsyncWeb3) -> int:
        try:
            return await w3.eth.estimate_gas(unbounded, block_identifier="latest")
        except Exception as exc:
            logger.info(f"Gas estimate failed on {w3.provider.endpoint_uri}: {exc}")
            return 0

    estimate = max(
        await _across_rpcs(get_transaction_chain_id(transaction), _estimate)
    )
    if estimate == 0:
        logger.error("Gas estimation failed on all RPCs")
        raise RuntimeError("Gas estimation failed on all RPCs")
    return {**unbounded, "gas": int(math.ceil(estimate * GAS_BUFFER_MULTIPLIER))}


async def broadcast_transaction(chain_id: int, signed_transaction: bytes) -> str:
    async with web3_from_chain_id(chain_id) as web3:
        return (await web3.eth.send_raw_transaction(signed_transaction)).hex()


async def wait_for_transaction_receipt(
    chain_id: int,
    txn_hash: str,
    poll_interval: float = 0.1,
    timeout: int = DEFAULT_TRANSACTION_TIMEOUT,
) -> dict:
    txn_hash = _prefixed(txn_hash)
    async with web3_from_chain_id(chain_id) as web3:
        receipt = dict(
            await web3.eth.wait_for_transaction_receipt(
                txn_hash, poll_latency=poll_interval, timeout=timeout
            )
        )
    if receipt.get("status") == 0:
        raise TransactionRevertedError(txn_hash, receipt)
    return receipt


async def send_transaction(
    transaction: dict, sign_callback: SignCallback | None, wait_for_receipt=True
) -> str:
    """Fill gas, nonce and fees, sign, broadcast and (optionally) await the receipt.

    Raises ``TransactionRevertedError`` for a mined revert; RPC and signing
    errors propagate unchanged.
    """
    if sign_callback is None:
        raise ValueError("sign_callback must be provided to send transaction")

    chain_id = get_transaction_chain_id(transaction)
    logger.info(f"Broadcasting transaction {transaction}...")
    for fill in (gas_limit_transaction, nonce_transaction, gas_price_transaction):
        transaction = await fill(transaction)

    txn_hash = _prefixed(
        await broadcast_transaction(chain_id, await sign_callback(transaction))
    )
    logger.info(f"Transaction broadcasted: {txn_hash}")

    if wait_for_receipt:
        try:
            await wait_for_transaction_receipt(chain_id, txn_hash)
        except TransactionRevertedError as exc:
            raise TransactionRevertedError.with_gas_context(
                txn_hash, exc.receipt, transaction
            ) from exc
    return txn_hash


async def encode_call(
    *,
    target: str,
    abi: list[dict[str, Any]],
    fn_name: str,
    args: list[Any],
    from_address: str,
    chain_id: int,
    value: int = 0,
) -> dict[str, Any]:
    target = AsyncWeb3.to_checksum_address(target)
    async with web3_from_chain_id(chain_id) as web3:
        try:
            data = web3.eth.contract(address=target, abi=abi).encode_abi(fn_name, args)
        except (ValueError, TypeError) as exc:
            raise ValueError(f"Failed to encode {fn_name}: {exc}") from exc

    return {
        "chainId": int(chain_id),
        "from": AsyncWeb3.to_checksum_address(from_address),
        "to": target,
        "data": data,
        "value": int(value),
    }


def local_sign_callback(private_key: str) -> SignCallback:
    """Sign with a key held in process memory."""
    account = Account.from_key(private_key)

    async def sign_callback(transaction: dict) -> bytes:
        return account.sign_transaction(transaction).raw_transaction

    return sign_callback
