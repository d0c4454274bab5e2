from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from cashswap.api.deps import get_trade_service
from cashswap.api.schemas.pools import PoolListResponse, PoolResponse
from cashswap.trading.price_impact import weighted_average_rate
from cashswap.trading.service import TradeService

router = APIRouter(prefix="/api/pools", tags=["pools"])

ServiceDep = Annotated[TradeService, Depends(get_trade_service)]


@router.get("/{token_id}", response_model=PoolListResponse)
async def list_pools(
    token_id: str,
    service: ServiceDep,
    no_cache: bool = Query(False, description="Bypass the indexer cache"),
) -> PoolListResponse:
    pools = await service.load_pools(token_id, no_cache=no_cache)

    rate = None
    if sum(p.token_amount for p in pools) > 0:
        r = weighted_average_rate(pools)
        rate = str(Decimal(r.numerator) / Decimal(r.denominator))

    return PoolListResponse(
        token_id=token_id,
        pools=[
            PoolResponse(
                txid=p.outpoint.txhash.hex(),
                tx_pos=p.outpoint.index,
                owner_pkh=p.owner_pkh.hex(),
                token_id=p.token_id,
                token_amount=p.token_amount,
                native_amount=p.native_amount,
            )
            for p in pools
        ],
        total_token_amount=sum(p.token_amount for p in pools),
        total_native_amount=sum(p.native_amount for p in pools),
        weighted_rate=rate,
    )
