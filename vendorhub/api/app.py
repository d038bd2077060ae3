"""
Application factory.

Usage:
    uvicorn vendorhub.api.app:create_app --factory
"""

import functools
import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..common.cache import TTLCache
from ..common.config_loader import Settings, load_settings
from ..common.errors import VendorHubError
from ..common.log_config import setup_logging
from ..db.migrations import run_migrations
from ..db.session import create_db_engine, make_session_factory
from ..shopify.api_client import ShopifyAPIClient
from .routes import admin, auth, health, products, shopify

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Render every failure as a JSON body of the form {"error": message}."""

    @app.exception_handler(VendorHubError)
    async def handle_domain_error(request: Request, exc: VendorHubError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        details = [
            {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"error": "Missing required fields", "details": details})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    settings: Optional[Settings] = None,
    client_factory: Optional[Callable[[str, str], ShopifyAPIClient]] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Resolved settings (default: load_settings())
        client_factory: Builds Shopify clients from (shop, access_token)

    Returns:
        Configured FastAPI app
    """
    settings = settings or load_settings()
    setup_logging(verbose=settings.log_verbose)

    engine = create_db_engine(settings.database_url)
    if settings.auto_migrate:
        applied = run_migrations(engine)
        if applied:
            logger.info("Applied migrations: %s", applied)

    app = FastAPI(title="VendorHub", version=__version__)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.cache = TTLCache(ttl=settings.listing_cache_ttl)
    app.state.client_factory = client_factory or functools.partial(
        ShopifyAPIClient, api_version=settings.shopify_api_version
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    for module in (health, auth, products, admin, shopify):
        app.include_router(module.router)

    return app
