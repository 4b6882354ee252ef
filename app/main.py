from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from app.routers import validation

from app.utils.logging_config import configure_for_environment, get_logger
from app.middleware.error_handlers import ExceptionHandlerMiddleware, PerformanceMiddleware

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("CV Validation API starting up...")

    # Fails fast on bad thresholds or a missing provider credential
    try:
        service = validation.get_validation_service()
    except Exception as e:
        logger.critical(f"Startup aborted: {e}")
        raise
    logger.info(f"Validation service ready (reference date {service.config.reference_date})")

    yield

    logger.info("CV Validation API shutting down...")

app = FastAPI(title="CV Validation API", version="1.0.0", lifespan=lifespan)

# Last added runs first, so the exception handler also covers PerformanceMiddleware
app.add_middleware(PerformanceMiddleware, slow_request_threshold=30.0)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    return {"message": "Welcome to the CV Validation API", "version": "1.0.0", "status": "ok"}

@app.get("/health")
@app.head("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

app.include_router(validation.router, prefix="/api")

logger.info("CV Validation API initialized successfully")
