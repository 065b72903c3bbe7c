"""
Posts Service
Main FastAPI application for posts, likes and popularity ranking
"""
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from .config import settings
from .infrastructure.database.connection import db_connection
from .api.routes import posts_router, users_router
from .schemas import ErrorResponse

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.DEBUG else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Starting Posts Service...")
    await db_connection.connect()
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} started on port {settings.PORT}")

    yield

    # Shutdown
    logger.info("Shutting down Posts Service...")
    await db_connection.disconnect()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Posts service with popularity ranking, search and soft deletion",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Log unexpected errors and answer with a generic 500"""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error="Internal server error").model_dump()
    )


def _health_payload() -> dict:
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint"""
    return _health_payload()


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return _health_payload()


# Add routers
app.include_router(posts_router)
app.include_router(users_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "posts_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
