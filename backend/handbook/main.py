import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .api import tracking, search, export
from .config import settings
from .core.bootstrap import SchemaBootstrap
from .core.errors import HandbookError
from .database import engine

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger("handbook")

schema_bootstrap = SchemaBootstrap(engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Ensure click tracking tables exist before serving traffic
    schema_bootstrap.run()
    if not schema_bootstrap.tracking_available:
        logger.warning("Click tracking disabled: schema bootstrap failed")
    yield


# Initialize FastAPI app
app = FastAPI(
    title=settings.SERVICE_NAME,
    description="Policy click tracking, handbook search and policy export",
    version="1.0.0",
    lifespan=lifespan
)

# Setup rate limiter
app.state.limiter = tracking.limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware for the handbook pages
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(HandbookError)
async def handbook_error_handler(request: Request, exc: HandbookError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.public_message}
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.debug("Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Invalid request"}
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error"}
    )


# Include routers
app.include_router(tracking.router, prefix="/api", tags=["tracking"])
app.include_router(search.router, prefix="/api", tags=["search"])
app.include_router(export.router, prefix="/api", tags=["export"])


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.SERVICE_NAME,
        "clickTracking": schema_bootstrap.state.value
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
