import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from config import settings
from database import init_db
from exceptions import LedgerError
from crud.api.v1.endpoints import business, customers, exchange_rates, inventory, invoice, reports
from utils.logging_config import setup_logging

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
log = logging.getLogger("ledger.http")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    log.info("database_ready")
    yield


app = FastAPI(title="SDG Ledger API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.middleware("http")
async def exception_handling(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        log.error("request_failed method=%s path=%s", request.method, request.url.path, exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Server error"})
    log.info(
        "request method=%s path=%s status=%s duration_ms=%.1f",
        request.method, request.url.path, response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(inventory.router, prefix="/api/v1/products", tags=["products"])
app.include_router(invoice.router, prefix="/api/v1/invoices", tags=["invoices"])
app.include_router(customers.router, prefix="/api/v1/customers", tags=["customers"])
app.include_router(exchange_rates.router, prefix="/api/v1/exchange-rates", tags=["exchange-rates"])
app.include_router(business.router, prefix="/api/v1", tags=["business"])
app.include_router(reports.router, prefix="/api/v1/reports", tags=["reports"])


@app.get("/health", tags=["system"])
def health_check():
    return {"status": "ok", "timestamp": datetime.now().isoformat()}

if __name__ == '__main__':
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT, reload=False)
