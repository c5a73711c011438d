from __future__ import annotations

# Minimal ABI for a Dutch auction that sells one token for another on behalf
# of a receiver and calls back into the receiver through optional hooks.

AUCTION_INFO_KEYS = ["fromToken", "toToken", "kicked", "available"]

AUCTION_ABI = [
    {
        "type": "function",
        "stateMutability": "view",
        "name": "getAuctionId",
        "inputs": [
            {"name": "_from", "type": "address"},
            {"name": "_to", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "bytes32"}],
    },
    {
        "type": "function",
        "stateMutability": "view",
        "name": "auctionInfo",
        "inputs": [{"name": "_auctionId", "type": "bytes32"}],
        "outputs": [
            {"name": "_from", "type": "address"},
            {"name": "_to", "type": "address"},
            {"name": "_kicked", "type": "uint256"},
            {"name": "_available", "type": "uint256"},
        ],
    },
    {
        "type": "function",
        "stateMutability": "view",
        "name": "auctionLength",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "enable",
        "inputs": [
            {"name": "_from", "type": "address"},
            {"name": "_to", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "bytes32"}],
    },
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "kick",
        "inputs": [{"name": "_auctionId", "type": "bytes32"}],
        "outputs": [{"name": "available", "type": "uint256"}],
    },
    {
        "type": "function",
        "stateMutability": "nonpayable",
        "name": "setHookFlags",
        "inputs": [
            {"name": "_kickable", "type": "bool"},
            {"name": "_kick", "type": "bool"},
            {"name": "_preTake", "type": "bool"},
            {"name": "_postTake", "type": "bool"},
        ],
        "outputs": [],
    },
]
