GAS_BUFFER_MULTIPLIER = 1.1
SUGGESTED_PRIORITY_FEE_MULTIPLIER = 1.5
SUGGESTED_GAS_PRICE_MULTIPLIER = 1.5
MAX_BASE_FEE_GROWTH_MULTIPLIER = 2

# Timeout constants (seconds)
DEFAULT_TRANSACTION_TIMEOUT = 180  # Transaction receipt timeout (seconds)

ADAPTER_SILO = "SILO"
ADAPTER_INCENTIVES = "INCENTIVES"
ADAPTER_AUCTION = "AUCTION"
ADAPTER_TOKEN = "TOKEN"

MAX_UINT256 = 2**256 - 1
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
