"""
Arkitek Builder - Main FastAPI application entry point
"""

import uuid
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .models.base import ErrorResponse
from .exceptions import ArkitekBuilderError, ErrorCode
from .utils.logging import setup_logging, get_logger
from .middleware.logging_middleware import LoggingMiddleware
from .storage.file_backend import JsonFileStorageBackend
from .registry.link_registry import ClusterLinkRegistry
from .services.boot_script_generator import BootScriptGenerator
from .api.routes import router, init_cluster_link_services
from .api.diagnostics_routes import router as diagnostics_router
from .api.web_interface_routes import router as web_interface_router, init_web_interface_services

# Initialize structured logging
setup_logging(
    log_level=settings.monitoring.log_level.value,
    structured=settings.monitoring.structured_logging,
    enable_request_tracking=True
)
logger = get_logger(__name__)

app = FastAPI(
    title=settings.api.title,
    description=settings.api.description,
    version=settings.api.version,
    docs_url=settings.api.docs_url,
    redoc_url=settings.api.redoc_url,
    openapi_url=settings.api.openapi_url,
    openapi_tags=[
        {
            "name": "Cluster Links",
            "description": "Registry of remote cluster endpoints"
        },
        {
            "name": "Boot Scripts",
            "description": "iPXE boot script generation"
        },
        {
            "name": "Diagnostics",
            "description": "Benchmark and continuous test requests"
        },
        {
            "name": "Web Interface",
            "description": "Data for the web interface pages"
        },
        {
            "name": "Health",
            "description": "Health check endpoints"
        }
    ]
)

app.add_middleware(
    LoggingMiddleware,
    log_requests=True,
    log_responses=True,
    exclude_paths=['/health', '/favicon.ico']
)

# Add CORS middleware using settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_credentials=True,
    allow_methods=settings.api.cors_methods,
    allow_headers=settings.api.cors_headers,
)

# Initialize storage backend and services
storage_backend = JsonFileStorageBackend(settings.storage.links_file)
link_registry = ClusterLinkRegistry(storage_backend)
boot_script_generator = BootScriptGenerator(settings.boot_script)

init_cluster_link_services(link_registry, boot_script_generator)
init_web_interface_services(link_registry, boot_script_generator)

app.include_router(router)
app.include_router(diagnostics_router)
app.include_router(web_interface_router)


# Application lifecycle events
@app.on_event("startup")
async def startup_event():
    """Initialize services on application startup."""
    logger.info(
        "Starting Arkitek Builder application",
        extra={
            'environment': settings.environment.value,
            'debug': settings.debug,
            'log_level': settings.monitoring.log_level.value,
            'links_file': settings.storage.links_file
        }
    )
    await link_registry.initialize()


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up resources on application shutdown."""
    logger.info("Shutting down Arkitek Builder application")
    await link_registry.storage.close()


@app.get("/", tags=["General"])
async def root():
    """Root endpoint returning basic API information and available endpoints"""
    return {
        "name": settings.api.title,
        "version": settings.api.version,
        "description": settings.api.description,
        "environment": settings.environment.value,
        "docs_url": settings.api.docs_url,
        "redoc_url": settings.api.redoc_url,
        "openapi_url": settings.api.openapi_url,
        "endpoints": {
            "cluster_links": "/api/cluster-links",
            "ipxe_generate": "/api/ipxe/generate",
            "benchmark": "/api/benchmark/run",
            "run_until_fail": "/api/test/run-until-fail",
            "web": {
                "dashboard": "/web/dashboard",
                "cluster_config": "/web/cluster-config",
                "ipxe_boot": "/web/ipxe-boot"
            },
            "health": "/health"
        }
    }


@app.get("/health", tags=["Health"])
async def health():
    """Report whether the cluster link storage is usable."""
    storage_health = await link_registry.storage.health_check()
    return {
        "status": storage_health["status"],
        "version": settings.api.version,
        "storage": storage_health
    }


# Global exception handlers

def generate_request_id() -> str:
    """Generate a unique request ID for error tracking."""
    return str(uuid.uuid4())[:8]


_STATUS_BY_ERROR_CODE = {
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.STORAGE_ERROR: 500,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
}


@app.exception_handler(ArkitekBuilderError)
async def arkitek_builder_exception_handler(request: Request, exc: ArkitekBuilderError):
    """Handle custom ArkitekBuilderError exceptions with structured response."""
    request_id = generate_request_id()
    status_code = _STATUS_BY_ERROR_CODE.get(exc.error_code, 500)

    if status_code >= 500:
        logger.error(f"[{request_id}] Server error for {request.url}: {exc}", exc_info=exc.cause)
    else:
        logger.warning(f"[{request_id}] Client error for {request.url}: {exc}")

    error_dict = exc.to_dict()
    error_response = ErrorResponse(
        error=error_dict["error"],
        message=error_dict["message"],
        details=jsonable_encoder(error_dict["details"]),
        request_id=request_id
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode='json')
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors with structured response."""
    request_id = generate_request_id()
    logger.warning(f"[{request_id}] Validation error for {request.url}: {exc.errors()}")

    field_errors = {}
    for error in exc.errors():
        field_path = ".".join(str(loc) for loc in error["loc"])
        field_errors[field_path] = error["msg"]

    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error=ErrorCode.VALIDATION_ERROR.value,
            message="Request validation failed",
            details={
                "field_errors": field_errors,
                "validation_errors": jsonable_encoder(exc.errors())
            },
            request_id=request_id
        ).model_dump(mode='json')
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions with structured response."""
    request_id = generate_request_id()
    logger.warning(f"[{request_id}] HTTP error {exc.status_code} for {request.url}: {exc.detail}")

    error_code_map = {
        400: ErrorCode.VALIDATION_ERROR.value,
        404: ErrorCode.NOT_FOUND.value,
        405: "METHOD_NOT_ALLOWED",
        409: ErrorCode.CONFLICT.value,
        422: ErrorCode.VALIDATION_ERROR.value,
        500: ErrorCode.INTERNAL_SERVER_ERROR.value,
    }

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=error_code_map.get(exc.status_code, f"HTTP_{exc.status_code}"),
            message=exc.detail or f"HTTP {exc.status_code} error occurred",
            details={"status_code": exc.status_code},
            request_id=request_id
        ).model_dump(mode='json')
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with structured response."""
    request_id = generate_request_id()
    logger.error(f"[{request_id}] Unexpected error for {request.url}: {exc}", exc_info=True)

    details = {
        "type": type(exc).__name__,
        "request_id": request_id
    }

    if settings.is_development() or settings.debug:
        details["message"] = str(exc)

    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error=ErrorCode.INTERNAL_SERVER_ERROR.value,
            message="An unexpected error occurred. Please try again or contact support.",
            details=details,
            request_id=request_id
        ).model_dump(mode='json')
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "arkitek_builder.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.reload
    )
