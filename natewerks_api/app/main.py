"""
Main entrypoint for the Natewerks API.

This module assembles the FastAPI application: logging, CORS, the
service objects and the mapping from service exceptions to JSON error
responses.  ``create_app`` accepts pre‑built collaborators so tests can
inject a temporary store and a fake payment gateway; the module‑level
``app`` is built from ``settings`` for uvicorn::

    uvicorn natewerks_api.app.main:app --port 5000
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.router import router
from .core.config import Settings, settings as default_settings
from .core.db import DocumentStore
from .core.errors import ServiceError
from .core.logging_config import setup_logging
from .core.security import CredentialVerifier, PrincipalResolver, StorePrincipalResolver, build_verifier
from .integrations.stripe_client import StripeGateway
from .services.admin_service import AdminService
from .services.billing_service import BillingService
from .services.user_service import UserService

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    gateway: Optional[StripeGateway] = None,
    verifier: Optional[CredentialVerifier] = None,
    resolver: Optional[PrincipalResolver] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Any collaborator left as ``None`` is built from ``settings``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    store = store or DocumentStore(settings.database_url)
    gateway = gateway or StripeGateway(settings.stripe_secret_key, settings.stripe_api_version)
    verifier = verifier or build_verifier(settings.password_scheme)
    resolver = resolver or StorePrincipalResolver(store)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.store = store
    app.state.user_service = UserService(store, verifier)
    app.state.billing_service = BillingService(store, gateway, settings.stripe_price_id)
    app.state.admin_service = AdminService(store, resolver)

    app.include_router(router)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={exc.body_key: exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Bodies are not validated beyond their shape; anything pydantic
        # still rejects (a list for a text field, malformed JSON) is a 500.
        message = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        logger.error("%s %s rejected: %s", request.method, request.url.path, message)
        return JSONResponse(status_code=500, content={"error": message})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error in %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.on_event("startup")
    async def startup_event() -> None:
        # The listener keeps running without a database; requests that
        # need it fail with 500 until it becomes reachable.
        try:
            store.ping()
        except ServiceError as exc:
            logger.error("Database connection failed: %s", exc)
        else:
            logger.info("Database connected at %s", store.path)

    return app


app = create_app()
