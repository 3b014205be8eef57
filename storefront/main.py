# storefront/main.py
from fastapi import FastAPI
import uvicorn

from storefront.api.routers import admin, banners, cart, catalog, health, orders, users
from storefront.utils.logging import get_logger
from storefront.utils.settings import STORE_BACKEND

logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Storefront",
        version="1.0.0",
    )

    app.include_router(health.router)
    app.include_router(catalog.router)
    app.include_router(cart.router)
    app.include_router(orders.router)
    app.include_router(users.router)
    app.include_router(admin.router)
    app.include_router(banners.router)

    logger.info(f"Storefront API ready, store backend: {STORE_BACKEND}")
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
