from typing import Any

from loguru import logger
from web3 import AsyncWeb3

from harvest_paths.core.constants.erc20_abi import ERC20_ABI
from harvest_paths.core.utils.transaction import (
    SignCallback,
    encode_call,
    send_transaction,
)
from harvest_paths.core.utils.web3 import web3_from_chain_id


def _erc20(web3: AsyncWeb3, token_address: str) -> Any:
    return web3.eth.contract(
        address=web3.to_checksum_address(token_address), abi=ERC20_ABI
    )


async def get_token_balance(
    token_address: str,
    chain_id: int,
    wallet_address: str,
    *,
    block_identifier: str | int = "pending",
) -> int:
    async with web3_from_chain_id(chain_id) as web3:
        holder = web3.to_checksum_address(wallet_address)
        balance = await _erc20(web3, token_address).functions.balanceOf(holder).call(
            block_identifier=block_identifier
        )
    return int(balance)


async def get_token_total_supply(
    token_address: str,
    chain_id: int,
    *,
    block_identifier: str | int = "pending",
) -> int:
    async with web3_from_chain_id(chain_id) as web3:
        supply = await _erc20(web3, token_address).functions.totalSupply().call(
            block_identifier=block_identifier
        )
    return int(supply)


async def get_token_allowance(
    token_address: str, chain_id: int, owner_address: str, spender_address: str
) -> int:
    async with web3_from_chain_id(chain_id) as web3:
        allowance = await _erc20(web3, token_address).functions.allowance(
            web3.to_checksum_address(owner_address),
            web3.to_checksum_address(spender_address),
        ).call(block_identifier="pending")
    return int(allowance)


async def ensure_allowance(
    *,
    token_address: str,
    owner: str,
    spender: str,
    amount: int,
    chain_id: int,
    signing_callback: SignCallback | None,
    approval_amount: int | None = None,
) -> str | None:
    """Approve ``spender`` if the current allowance is below ``amount``.

    Returns the approval hash, or ``None`` when no approval was needed.
    """
    allowance = await get_token_allowance(token_address, chain_id, owner, spender)
    if allowance >= amount:
        return None

    approve_tx = await encode_call(
        target=token_address,
        abi=ERC20_ABI,
        fn_name="approve",
        args=[
            AsyncWeb3.to_checksum_address(spender),
            approval_amount if approval_amount is not None else amount,
        ],
        from_address=owner,
        chain_id=chain_id,
    )
    logger.info(f"Approving {spender} to spend {token_address} for {owner}")
    return await send_transaction(approve_tx, signing_callback)
