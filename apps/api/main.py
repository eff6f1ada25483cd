import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .db import close_pool
from .errors import InvalidLineItem, InvalidTotalsPolicy, StorageUnavailable
from .settings import settings
from .routes.clients import router as clients_router
from .routes.company import router as company_router
from .routes.dashboard import router as dashboard_router
from .routes.documents import purchase_orders_router, sales_invoices_router, vendor_invoices_router
from .routes.health import router as health_router
from .routes.payments import receipts_router, vouchers_router
from .routes.totals import router as totals_router
from .routes.vendors import router as vendors_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    close_pool()


app = FastAPI(
    title="DocuPro API",
    version="0.1.0",
    description="Purchase orders, invoices, payment vouchers and receipts, with their vendors and clients.",
    lifespan=lifespan,
)


@app.exception_handler(StorageUnavailable)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailable):
    logger.error("storage unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Storage unavailable", "error": str(exc)})


@app.exception_handler(InvalidLineItem)
async def invalid_line_item_handler(request: Request, exc: InvalidLineItem):
    return JSONResponse(
        status_code=422,
        content={"detail": [{"field": f"lines[{exc.index}].{exc.field}", "code": "INVALID_LINE_ITEM", "message": str(exc)}]},
    )


@app.exception_handler(InvalidTotalsPolicy)
async def invalid_totals_policy_handler(request: Request, exc: InvalidTotalsPolicy):
    return JSONResponse(
        status_code=422,
        content={"detail": [{"field": "policy", "code": "INVALID_TOTALS_POLICY", "message": str(exc)}]},
    )


app.include_router(purchase_orders_router)
app.include_router(sales_invoices_router)
app.include_router(vendor_invoices_router)
app.include_router(vouchers_router)
app.include_router(receipts_router)
app.include_router(vendors_router)
app.include_router(clients_router)
app.include_router(company_router)
app.include_router(dashboard_router)
app.include_router(totals_router)
app.include_router(health_router)
