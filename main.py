"""
Main FastAPI application entry point.
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.core.config import settings
from app.core.exceptions import CatalogError, ConflictError, SchemaError, ValidationError
from app.schemas.catalog import ErrorResponse
from app.routers import api_router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format=settings.log_format,
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump()
    )


# Map catalog errors onto HTTP status codes
ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    SchemaError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError):
    """Translate catalog errors into the error envelope"""
    status_code = ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
    return error_response(status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors with detailed messages"""
    error_messages = []

    for error in exc.errors():
        field = " -> ".join(str(x) for x in error["loc"])
        error_messages.append(f"{field}: {error['msg']}")

    logger.error(f"Validation error: {error_messages}")
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, "; ".join(error_messages))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Request failed: {str(exc)}", exc_info=True)
    message = str(exc) if settings.debug else "Internal server error"
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


# Include API router
app.include_router(api_router, prefix="/api")


@app.get("/")
def read_root():
    """Root endpoint for health check."""
    return {
        "status": "ok",
        "app_name": settings.app_name,
        "version": settings.app_version,
        "environment": settings.ENVIRONMENT
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )
