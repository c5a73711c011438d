from __future__ import annotations

# Minimal ABIs for a Silo lending market and its incentives controller.

ASSET_STORAGE_KEYS = [
    "collateralToken",
    "collateralOnlyToken",
    "debtToken",
    "totalDeposits",
    "collateralOnlyDeposits",
    "totalBorrowAmount",
]

SILO_ABI = [
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "deposit",
        "inputs": [
            {"name": "_asset", "type": "address"},
            {"name": "_amount", "type": "uint256"},
            {"name": "_collateralOnly", "type": "bool"},
        ],
        "outputs": [
            {"name": "collateralAmount", "type": "uint256"},
            {"name": "collateralShare", "type": "uint256"},
        ],
    },
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "withdraw",
        "inputs": [
            {"name": "_asset", "type": "address"},
            {"name": "_amount", "type": "uint256"},
            {"name": "_collateralOnly", "type": "bool"},
        ],
        "outputs": [
            {"name": "withdrawnAmount", "type": "uint256"},
            {"name": "withdrawnShare", "type": "uint256"},
        ],
    },
    {
        "type": "function",
        "stateMutability": "view",
        "name": "assetStorage",
        "inputs": [{"name": "_asset", "type": "address"}],
        "outputs": [
            {
                "name": "",
                "type": "tuple",
                "components": [
                    {"name": "collateralToken", "type": "address"},
                    {"name": "collateralOnlyToken", "type": "address"},
                    {"name": "debtToken", "type": "address"},
                    {"name": "totalDeposits", "type": "uint256"},
                    {"name": "collateralOnlyDeposits", "type": "uint256"},
                    {"name": "totalBorrowAmount", "type": "uint256"},
                ],
            }
        ],
    },
]

INCENTIVES_CONTROLLER_ABI = [
    {
        "type": "function",
        "stateMutability": "view",
        "name": "getRewardsBalance",
        "inputs": [
            {"name": "assets", "type": "address[]"},
            {"name": "user", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "claimRewards",
        "inputs": [
            {"name": "assets", "type": "address[]"},
            {"name": "amount", "type": "uint256"},
            {"name": "to", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "stateMutability": "view",
        "name": "REWARD_TOKEN",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
]
