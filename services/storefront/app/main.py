"""Lumidumi storefront API entrypoint."""

from fastapi import FastAPI

from services.storefront.app.db.init_db import init_db
from services.storefront.app.errors import install_error_handlers
from services.storefront.app.logging_config import setup_logging
from services.storefront.app.routers.admin import router as admin_router
from services.storefront.app.routers.admin_products import router as admin_products_router
from services.storefront.app.routers.auth import router as auth_router
from services.storefront.app.routers.custom_orders import router as custom_orders_router
from services.storefront.app.routers.orders import router as orders_router
from services.storefront.app.routers.payment import router as payment_router
from services.storefront.app.routers.products import router as products_router

setup_logging()

app = FastAPI(title="Lumidumi Storefront API")
install_error_handlers(app)

app.include_router(payment_router)
app.include_router(auth_router)
app.include_router(orders_router)
app.include_router(products_router)
app.include_router(custom_orders_router)
app.include_router(admin_router)
app.include_router(admin_products_router)


@app.on_event("startup")
def _startup() -> None:
    init_db()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
