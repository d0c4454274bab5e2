from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from cashswap.container import Container
from cashswap.trading.service import TradeService


@inject
async def get_trade_service(
    service: TradeService = Depends(Provide[Container.trade_service]),
) -> TradeService:
    return service
