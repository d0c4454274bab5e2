from typing import Annotated

from fastapi import APIRouter, Depends

from cashswap.api.deps import get_trade_service
from cashswap.api.schemas.trades import QuoteEntryResponse, QuoteRequest, QuoteResponse
from cashswap.domain.models.trade import TradeRequest
from cashswap.trading.service import TradeService

router = APIRouter(prefix="/api/trades", tags=["trades"])

ServiceDep = Annotated[TradeService, Depends(get_trade_service)]


@router.post("/quote", response_model=QuoteResponse)
async def quote_trade(body: QuoteRequest, service: ServiceDep) -> QuoteResponse:
    """Propose a trade and report its price impact. Nothing is funded or signed."""
    proposal = await service.propose_trade(TradeRequest(**body.model_dump()))
    return QuoteResponse(
        supply_token_id=body.supply_token_id,
        demand_token_id=body.demand_token_id,
        entries=[
            QuoteEntryResponse(
                pool_txid=e.pool.outpoint.txhash.hex(),
                pool_tx_pos=e.pool.outpoint.index,
                supply_token_id=e.supply_token_id,
                demand_token_id=e.demand_token_id,
                supply=e.supply,
                demand=e.demand,
            )
            for e in proposal.entries
        ],
        total_supply=proposal.total_supply,
        total_demand=proposal.total_demand,
        price_impact=proposal.price_impact,
    )
