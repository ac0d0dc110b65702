from contextlib import asynccontextmanager
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from . import __version__
from .config import get_settings
from .database import close_db, init_db
from .routers import resumes_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await init_db()
    logger.info(f"{settings.app_name} started (Gemini configured: {bool(settings.gemini_api_key)})")
    yield
    # Shutdown
    await close_db()


app = FastAPI(
    title=settings.app_name,
    description="PDF resume analysis with Gemini and heuristic fallback",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,  # Disable docs in production
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware - uses origins from environment variable
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class NoCacheMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        # API responses only, uploaded files stay cacheable
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response


app.add_middleware(NoCacheMiddleware)

app.include_router(resumes_router)

os.makedirs(os.path.join(settings.uploads_dir, "resumes"), exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.uploads_dir), name="uploads")


@app.get("/")
async def root():
    return {"message": settings.app_name, "status": "running", "version": __version__}


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancer"""
    return {"status": "healthy"}


@app.get("/api/status")
async def api_status():
    return {
        "status": "running",
        "version": __version__,
        "gemini_configured": bool(settings.gemini_api_key),
        "candidate_models": settings.get_gemini_models(),
    }
