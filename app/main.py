from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager
from app.config import settings
from app.exceptions import APIError, api_error_handler
from app.routes import genres, actors, movies
from app.services.pagination import TOTAL_COUNT_HEADER, TOTAL_PAGES_HEADER
import logging
import time

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


# ============================================
# Application Lifespan Management
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log configuration on startup and a banner on shutdown"""
    logger.info("=" * 60)
    logger.info("🎬 Movie Catalog API Starting...")
    logger.info(f"   Environment: {settings.ENVIRONMENT}")
    logger.info(f"   Page size: default {settings.DEFAULT_PAGE_SIZE}, max {settings.MAX_PAGE_SIZE}")
    logger.info(f"   Asset root: {settings.ASSET_ROOT}")
    logger.info("=" * 60)

    yield

    logger.info("=" * 60)
    logger.info("🛑 Movie Catalog API Shutting Down...")
    logger.info("=" * 60)


app = FastAPI(
    title="Movie Catalog API",
    description="Movies, actors and genres with ordered casts and stored posters/photos",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# ============================================
# CORS
# ============================================

allowed_origins = [
    "http://localhost:3000",
    "http://localhost:4200",
    "http://localhost:5173",
]
if settings.FRONTEND_URL:
    allowed_origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=[TOTAL_COUNT_HEADER, TOTAL_PAGES_HEADER],  # pagination metadata
)

# ============================================
# Exception Handlers
# ============================================

app.add_exception_handler(APIError, api_error_handler)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Catch-all: log the traceback, never leak internals to the client"""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "message": "Internal server error"}
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and duration"""
    start_time = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start_time) * 1000

    log_msg = f"{request.method} {request.url.path} status={response.status_code} duration={duration_ms:.2f}ms"
    if response.status_code >= 500:
        logger.error(log_msg)
    elif response.status_code >= 400:
        logger.warning(log_msg)
    else:
        logger.info(log_msg)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    return response

# ============================================
# Routes
# ============================================

@app.get("/", tags=["Health"])
async def root():
    """Basic health check"""
    return {
        "message": "Movie Catalog API",
        "version": "1.0.0",
        "status": "healthy",
        "docs": "/docs"
    }


app.include_router(genres.router)
app.include_router(actors.router)
app.include_router(movies.router)

# Locally stored posters and photos
app.mount("/media", StaticFiles(directory=settings.ASSET_ROOT, check_dir=False), name="media")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
