from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from harvest_paths.core.constants.base import MAX_UINT256
from harvest_paths.core.utils.tokens import ensure_allowance, get_token_balance

TOKEN = "0x1111111111111111111111111111111111111111"
OWNER = "0x7777777777777777777777777777777777777777"
SPENDER = "0x4444444444444444444444444444444444444444"

MODULE = "harvest_paths.core.utils.tokens"


def _allowance_args(**overrides):
    args = {
        "token_address": TOKEN,
        "owner": OWNER,
        "spender": SPENDER,
        "amount": 100,
        "chain_id": 1,
        "signing_callback": AsyncMock(),
    }
    args.update(overrides)
    return args


@pytest.mark.asyncio
async def test_get_token_balance_reads_pending():
    balance_call = MagicMock(call=AsyncMock(return_value=77))
    contract = MagicMock()
    contract.functions.balanceOf = MagicMock(return_value=balance_call)
    web3 = MagicMock()
    web3.eth.contract = MagicMock(return_value=contract)
    web3.to_checksum_address = lambda a: a

    @asynccontextmanager
    async def ctx(_chain_id):
        yield web3

    with patch(f"{MODULE}.web3_from_chain_id", ctx):
        assert await get_token_balance(TOKEN, 1, OWNER) == 77

    contract.functions.balanceOf.assert_called_once_with(OWNER)
    balance_call.call.assert_awaited_once_with(block_identifier="pending")


@pytest.mark.asyncio
async def test_ensure_allowance_skips_when_sufficient():
    with (
        patch(f"{MODULE}.get_token_allowance", new=AsyncMock(return_value=100)),
        patch(f"{MODULE}.send_transaction", new=AsyncMock()) as send,
    ):
        assert await ensure_allowance(**_allowance_args()) is None
    send.assert_not_awaited()


@pytest.mark.asyncio
async def test_ensure_allowance_approves_requested_amount():
    enc = AsyncMock(return_value={"data": "0x"})
    with (
        patch(f"{MODULE}.get_token_allowance", new=AsyncMock(return_value=99)),
        patch(f"{MODULE}.encode_call", new=enc),
        patch(f"{MODULE}.send_transaction", new=AsyncMock(return_value="0xa")),
    ):
        result = await ensure_allowance(
            **_allowance_args(approval_amount=MAX_UINT256)
        )

    assert result == "0xa"
    assert enc.await_args.kwargs["fn_name"] == "approve"
    assert enc.await_args.kwargs["args"] == [SPENDER, MAX_UINT256]
    assert enc.await_args.kwargs["from_address"] == OWNER
