"""
FastAPI application factory.

Every failure leaves the API as ``{"error": ..., "code": ...}`` with the
status mapped from its error category.
"""

import time

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .. import __description__, __version__
from ..config import get_cors_origins
from ..error_handling import GalleryError, ValidationError, get_error_handler
from ..health import perform_health_check
from ..logging_config import get_logger, log_performance
from ..services.metadata import MetadataStore
from ..services.storage import BlobStore
from .dependencies import get_blobs, get_metadata
from .routers import auth, images, photos, settings

logger = get_logger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


async def gallery_error_handler(request: Request, exc: GalleryError) -> JSONResponse:
    error_info = get_error_handler().handle_error(exc, {"path": request.url.path})
    return JSONResponse(status_code=error_info.status_code, content=error_info.to_response_payload())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(
        "Malformed request",
        code="invalid_request",
        details={"path": request.url.path, "error_count": len(exc.errors())},
    )
    return await gallery_error_handler(request, error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "code": f"http_{exc.status_code}"},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    error_info = get_error_handler().handle_error(exc, {"path": request.url.path, "method": request.method})
    return JSONResponse(status_code=500, content=error_info.to_response_payload())


def create_app() -> FastAPI:
    """Build the gallery API with its middleware, routers and error handlers."""
    app = FastAPI(title="photogallery", description=__description__, version=__version__)

    origins = get_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        log_performance(
            "http_request",
            time.time() - start_time,
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        return response

    app.add_exception_handler(GalleryError, gallery_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(photos.router)
    app.include_router(settings.router)
    app.include_router(images.router)
    app.include_router(auth.router)

    @app.get("/health", tags=["Health"])
    def health(
        metadata_store: MetadataStore = Depends(get_metadata),
        blob_store: BlobStore = Depends(get_blobs),
    ) -> JSONResponse:
        report = perform_health_check(metadata_store, blob_store)
        return JSONResponse(status_code=200 if report["status"] == "healthy" else 503, content=report)

    logger.info("api_created", cors_origins=origins)
    return app
