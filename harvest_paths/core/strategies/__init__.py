from .auction_swapper import (
    AuctionAlreadyKickedError,
    AuctionState,
    AuctionSwapperMixin,
    HookPolicy,
)
from .Strategy import ShutdownGate, StatusDict, Strategy

__all__ = [
    "Strategy",
    "StatusDict",
    "ShutdownGate",
    "AuctionSwapperMixin",
    "AuctionState",
    "AuctionAlreadyKickedError",
    "HookPolicy",
]
