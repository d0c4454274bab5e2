import logging
import traceback
from contextlib import asynccontextmanager

from dependency_injector import providers
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from cashswap.api.pools import router as pools_router
from cashswap.api.trades import router as trades_router
from cashswap.container import Container
from cashswap.exceptions import (
    CashSwapError,
    DataIntegrityError,
    ExternalServiceError,
    InvalidTradeInputError,
    NoLiquidityError,
)
from cashswap.exchange.loader import load_oracle

logger = logging.getLogger("cashswap.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = Container()
    settings = container.settings()
    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
    oracle_path = settings.exchange_oracle
    if oracle_path:
        container.oracle.override(providers.Object(load_oracle(oracle_path)))
    else:
        logger.warning("CASHSWAP_EXCHANGE_ORACLE is not set, trade endpoints will fail")
    app.state.container = container
    yield
    await container.http_client().close()


app = FastAPI(title="cashswap", version="0.1.0", lifespan=lifespan)


def _status_for(exc: CashSwapError) -> int:
    if isinstance(exc, InvalidTradeInputError):
        return 400
    if isinstance(exc, NoLiquidityError):
        return 404
    if isinstance(exc, DataIntegrityError):
        return 422
    if isinstance(exc, ExternalServiceError):
        return 502
    return 500


@app.exception_handler(CashSwapError)
async def cashswap_exception_handler(request: Request, exc: CashSwapError):
    status = _status_for(exc)
    if status >= 500:
        logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(status_code=status, content={"detail": str(exc), "error": type(exc).__name__})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
    logger.error("Unhandled error on %s %s:\n%s", request.method, request.url.path, "".join(tb))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(pools_router)
app.include_router(trades_router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
