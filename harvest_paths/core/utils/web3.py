import asyncio
from contextlib import asynccontextmanager

from web3 import AsyncHTTPProvider, AsyncWeb3

from harvest_paths.core.config import get_rpc_urls


def rpc_urls_for_chain(chain_id: int) -> list[str]:
    configured = get_rpc_urls()
    # JSON config keys are strings; programmatic config may use ints
    urls = configured.get(str(chain_id)) or configured.get(chain_id)
    if not urls:
        raise ValueError(f"No RPCs configured for chain ID {chain_id}")
    return [urls] if isinstance(urls, str) else list(urls)


def make_web3(rpc_url: str) -> AsyncWeb3:
    return AsyncWeb3(
        AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"headers": AsyncHTTPProvider.get_request_headers()},
        )
    )


def get_transaction_chain_id(transaction: dict) -> int:
    if "chainId" not in transaction:
        raise ValueError("Transaction does not contain chainId")
    return int(transaction["chainId"])


@asynccontextmanager
async def web3s_from_chain_id(chain_id: int):
    """Yield one client per configured RPC, disconnecting all of them on exit."""
    web3s = [make_web3(url) for url in rpc_urls_for_chain(chain_id)]
    try:
        yield web3s
    finally:
        await asyncio.gather(*(w3.provider.disconnect() for w3 in web3s))


@asynccontextmanager
async def web3_from_chain_id(chain_id: int):
    async with web3s_from_chain_id(chain_id) as web3s:
        yield web3s[0]
