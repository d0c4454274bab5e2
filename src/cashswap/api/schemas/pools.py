from typing import Optional

from pydantic import BaseModel


class PoolResponse(BaseModel):
    txid: str
    tx_pos: int
    owner_pkh: str
    token_id: str
    token_amount: int
    native_amount: int


class PoolListResponse(BaseModel):
    token_id: str
    pools: list[PoolResponse]
    total_token_amount: int
    total_native_amount: int
    weighted_rate: Optional[str] = None  # decimal string, display only
