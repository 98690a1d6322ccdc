"""Top level API router registration."""
from fastapi import APIRouter, FastAPI

from airvoucher.api.routes import auth, health, navigation, retailer, sales, terminals


def register_routes(application: FastAPI) -> None:
    """Register all API routers with the FastAPI application."""
    api_router = APIRouter(prefix="/api")

    api_router.include_router(health.router, tags=["health"])
    api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
    api_router.include_router(navigation.router, tags=["navigation"])
    api_router.include_router(retailer.router, tags=["retailer"])
    api_router.include_router(terminals.router, tags=["terminals"])
    api_router.include_router(sales.router, tags=["sales"])

    application.include_router(api_router)


__all__ = ["register_routes"]
