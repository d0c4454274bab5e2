from typing import Optional

from pydantic import BaseModel, Field, model_validator


class QuoteRequest(BaseModel):
    supply_token_id: str
    demand_token_id: str
    demand_amount: Optional[int] = Field(default=None, gt=0)
    supply_amount: Optional[int] = Field(default=None, gt=0)
    tx_fee_per_byte: Optional[int] = Field(default=None, gt=0)
    no_cache: bool = False

    @model_validator(mode="after")
    def require_amount(self) -> "QuoteRequest":
        if self.demand_amount is None and self.supply_amount is None:
            raise ValueError("demand_amount or supply_amount is required")
        return self


class QuoteEntryResponse(BaseModel):
    pool_txid: str
    pool_tx_pos: int
    supply_token_id: str
    demand_token_id: str
    supply: int
    demand: int


class QuoteResponse(BaseModel):
    supply_token_id: str
    demand_token_id: str
    entries: list[QuoteEntryResponse]
    total_supply: int
    total_demand: int
    price_impact: float
