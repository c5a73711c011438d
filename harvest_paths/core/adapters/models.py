from pydantic import BaseModel, ConfigDict


class AssetStorage(BaseModel):
    model_config = ConfigDict(frozen=True)

    collateral_token: str
    collateral_only_token: str
    debt_token: str
    total_deposits: int
    collateral_only_deposits: int
    total_borrow_amount: int

    @property
    def liquidity(self) -> int:
        return max(0, self.total_deposits - self.total_borrow_amount)


class AuctionInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_token: str
    to_token: str
    # Unix seconds of the last kick; 0 if never kicked.
    kicked: int
    available: int
