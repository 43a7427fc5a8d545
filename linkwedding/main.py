import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from linkwedding.config import settings
from linkwedding.database import create_db_and_tables
from linkwedding.routes import (
    admin_bank_accounts,
    admin_dashboard,
    admin_orders,
    auth,
    bank_accounts,
    health,
    invoices,
    orders,
    products,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.ENV == "local":
        create_db_and_tables()
    yield

app = FastAPI(title=f"{settings.STORE_NAME} API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(products.router, prefix="/products", tags=["Public Products"])
app.include_router(bank_accounts.router, prefix="/bank-accounts", tags=["Public Bank Accounts"])
app.include_router(orders.router, prefix="/orders", tags=["Orders"])
app.include_router(invoices.router, prefix="/invoices", tags=["Invoices"])
app.include_router(admin_orders.router, prefix="/admin/orders", tags=["Admin Orders"])
app.include_router(admin_bank_accounts.router, prefix="/admin/bank-accounts", tags=["Admin Bank Accounts"])
app.include_router(admin_dashboard.router, prefix="/admin/dashboard", tags=["Admin Dashboard"])
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get("/")
def root():
    return {
        "auth_endpoints": ["/auth/login", "/auth/me"],
        "public_endpoints": [
            "/products", "/products/{product_id}", "/bank-accounts",
            "/orders/checkout", "/orders/discount/preview", "/orders",
        ],
        "invoice_endpoints": [
            "/invoices/{order_id}/summary", "/invoices/{order_id}/verify",
            "/invoices/{order_id}", "/invoices/{order_id}/confirm",
        ],
        "admin_order_endpoints": [
            "/admin/orders", "/admin/orders/stats", "/admin/orders/revenue-chart",
            "/admin/orders/{order_id}", "/admin/orders/{order_id}/status",
            "/admin/orders/bulk-status", "/admin/orders/bulk-delete",
        ],
        "admin_endpoints": ["/admin/bank-accounts", "/admin/dashboard"],
    }
