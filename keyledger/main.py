# keyledger/main.py

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from keyledger.api.customers import router as customers_router
from keyledger.api.invoices import router as invoices_router
from keyledger.api.quotes import router as quotes_router
from keyledger.api.reports import router as reports_router
from keyledger.api.services import router as services_router
from keyledger.api.vin import router as vin_router
from keyledger.config import settings
from keyledger.core.vin import VinCache, VinDecoder
from keyledger.errors import KeyLedgerError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # The VIN cache lives as long as the process serving requests
    with httpx.Client(timeout=10.0) as client:
        app.state.vin_decoder = VinDecoder(
            client,
            VinCache(
                ttl_seconds=settings.VIN_CACHE_TTL_SECONDS,
                max_entries=settings.VIN_CACHE_MAX_ENTRIES,
            ),
            settings.VIN_API_BASE_URL,
        )
        yield


app = FastAPI(
    title="KeyLedger API",
    version="0.1.0",
    description="Customers, services, quotes and invoices for a locksmith shop.",
    lifespan=lifespan,
)


@app.exception_handler(KeyLedgerError)
async def keyledger_error_handler(request: Request, exc: KeyLedgerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
def health_check():
    return {"status": "ok"}

app.include_router(customers_router)
app.include_router(services_router)
app.include_router(invoices_router)
app.include_router(quotes_router)
app.include_router(reports_router)
app.include_router(vin_router)
