from __future__ import annotations


def to_amount(share: int, total_amount: int, total_shares: int) -> int:
    """Convert a share balance into the asset amount it can redeem.

    Rounds down, the same way the Silo collateral token does, so the value
    reported here never exceeds what a withdrawal would actually return.
    """
    if total_shares == 0 or total_amount == 0:
        return 0
    return (int(share) * int(total_amount)) // int(total_shares)


def to_share(amount: int, total_amount: int, total_shares: int) -> int:
    if total_shares == 0 or total_amount == 0:
        return int(amount)
    return (int(amount) * int(total_shares)) // int(total_amount)


def to_share_round_up(amount: int, total_amount: int, total_shares: int) -> int:
    if total_shares == 0 or total_amount == 0:
        return int(amount)
    numerator = int(amount) * int(total_shares)
    result = numerator // int(total_amount)
    # Round up when there is a remainder
    if numerator % int(total_amount) != 0:
        result += 1
    return result
