"""FastAPI application: routers, domain error rendering, request-scoped log context."""

import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bookhub.api.catalog_routes import router as catalog_router
from bookhub.api.master_routes import router as master_router
from bookhub.api.order_routes import router as order_router
from bookhub.api.pending_routes import router as pending_router
from bookhub.api.set_quantity_routes import router as set_quantity_router
from bookhub.api.set_routes import router as set_router
from bookhub.db import init_db
from bookhub.errors import BookhubError
from bookhub.utils.logger import bind_context, clear_context, get_logger

logger = get_logger("bookhub.api.server")


def create_app() -> FastAPI:
    """Create the FastAPI app. Tables are created on first use of the database."""
    init_db()
    app = FastAPI(title="Bookhub Catalog & Orders", version="0.1.0")

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        clear_context()
        bind_context(request_id=request_id, method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_context()
        response.headers["x-request-id"] = request_id
        return response

    @app.exception_handler(BookhubError)
    async def bookhub_error_handler(request: Request, exc: BookhubError) -> JSONResponse:
        logger.info(
            "api.domain_error",
            path=request.url.path,
            code=exc.code,
            status_code=exc.status_code,
            detail=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(catalog_router)
    app.include_router(set_router)
    app.include_router(set_quantity_router)
    app.include_router(order_router)
    app.include_router(pending_router)
    app.include_router(master_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
