"""
FastAPI application for the CV profile extraction service.

Provides endpoints for:
- Uploading a CV and extracting a structured candidate profile
- Rendering the candidate summary document
- Listing the supported upload formats
"""

import logging

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import get_settings
from .models import ErrorResponse, HealthResponse
from .routers import extract
from .services.ai import AIServiceError, ResponseParseError
from .services.cv_service import get_cv_service
from .services.exceptions import CVExtractionError
from .services.file_classifier import FileTooLargeError
from .services.payload_service import PayloadEncodingError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting CV Profile Extraction Service...")
    # Initialize services on startup
    get_cv_service()
    logger.info("Services initialized successfully")
    yield
    logger.info("Shutting down CV Profile Extraction Service...")


# Create FastAPI application
app = FastAPI(
    title="CV Profile Extraction API",
    description="Structured candidate profiles from uploaded CVs using AI",
    version=__version__,
    lifespan=lifespan,
)

# Configure CORS for the browser front end
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Health Endpoints
# =============================================================================


@app.get("/", response_model=HealthResponse)
async def root() -> HealthResponse:
    """Root endpoint - health check."""
    return HealthResponse(
        status="healthy",
        message="CV Profile Extraction API is running",
        version=__version__,
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", message="Service is healthy", version=__version__)


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(extract.router)


# =============================================================================
# Exception Handlers
# =============================================================================


def _error_status(exc: CVExtractionError) -> int:
    if isinstance(exc, FileTooLargeError):
        return 413
    if isinstance(exc, PayloadEncodingError):
        return 422
    if isinstance(exc, ResponseParseError):
        return 502
    if isinstance(exc, AIServiceError):
        return 503
    return 400


@app.exception_handler(CVExtractionError)
async def cv_extraction_error_handler(request: Request, exc: CVExtractionError):
    """Map pipeline failures to a single user-facing message."""
    status_code = _error_status(exc)
    logger.warning(
        "Extraction failed (%s, HTTP %d): %s", exc.error_code, status_code, exc.detail
    )
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            detail=exc.user_message, error_code=exc.error_code
        ).model_dump(),
    )
