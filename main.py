import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import settings
from database import Database
from api import authors, books, health, users
from services.seed_service import SeedService
from utils.request_logging import RequestLoggingMiddleware

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


# Create directories BEFORE FastAPI app initialization
def create_directories():
    """Create all necessary directories on startup"""
    os.makedirs(settings.UPLOADS_DIR, exist_ok=True)
    logger.info(f"Directory ensured: {settings.UPLOADS_DIR}")


create_directories()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting BookStore API...")
    await Database.initialize()

    if settings.SEED_DATA:
        await SeedService.seed()
        logger.info("Seed data ensured")

    logger.info("Application started successfully")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await Database.close()


# Initialize FastAPI app
app = FastAPI(
    title="BookStore API",
    description="Manage the authors and books of the bookstore",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Invalid request data is a 400, matching the rest of the API's bad-request responses"""
    logger.warning(f"{request.method} {request.url.path}: Data was Incomplete")
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# Request lifecycle logging
app.add_middleware(RequestLoggingMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Cover images
app.mount("/uploads", StaticFiles(directory=settings.UPLOADS_DIR), name="uploads")


# Include routers
app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(users.router, prefix="/api", tags=["Users"])
app.include_router(authors.router, prefix="/api", tags=["Authors"])
app.include_router(books.router, prefix="/api", tags=["Books"])


@app.get("/")
async def root():
    return {
        "message": "BookStore API",
        "version": "1.0.0",
        "docs": "/docs"
    }
