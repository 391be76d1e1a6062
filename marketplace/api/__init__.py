# marketplace/api/__init__.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from marketplace.api.errors import register_exception_handlers
from marketplace.api.routers import carts, health, orders, products, users
from marketplace.utils.settings import CORS_ORIGINS


def create_app() -> FastAPI:
    app = FastAPI(
        title="Marketplace API",
        description="Second-hand marketplace: listings, cart, checkout and order history.",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router, prefix="/api")
    app.include_router(products.router, prefix="/api")
    app.include_router(carts.router, prefix="/api")
    app.include_router(orders.router, prefix="/api")

    return app
