"""
Storefront - Main FastAPI Application

Single entry point for the storefront API. One Storefront (catalog cache
plus cart store) is created per process in the lifespan handler.
"""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.logging import get_logger
from storefront.routers import storefront_router
from storefront.storefront import Storefront

logger = get_logger(__name__)


def create_app(storefront: Optional[Storefront] = None) -> FastAPI:
    """
    Build the ASGI app.

    Args:
        storefront: Pre-built Storefront (tests). When omitted one is
            wired from environment settings and loaded at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler"""
        # Startup
        owned = storefront is None
        instance = storefront or Storefront.from_settings()
        if owned:
            await instance.startup()
        app.state.storefront = instance
        yield
        # Shutdown
        if owned:
            await instance.aclose()

    app = FastAPI(
        title="Storefront",
        description="Product catalog with category cache, search and persisted cart",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS for the browser front-end
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(storefront_router, prefix="/api")

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "ok", "service": "storefront"}

    return app


app = create_app()
