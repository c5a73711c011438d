CHAIN_ID_ETHEREUM = 1
CHAIN_ID_BASE = 8453
CHAIN_ID_ARBITRUM = 42161

# Chains priced with a single legacy gasPrice rather than EIP-1559 fee fields
PRE_EIP_1559_CHAIN_IDS: frozenset[int] = frozenset({CHAIN_ID_ARBITRUM})
