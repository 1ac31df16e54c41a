"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pathlib import Path
from dotenv import load_dotenv
from starlette.middleware.base import BaseHTTPMiddleware

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import colorblocks, projects, statements
from db import init_db
from settings import settings


class PrivateNetworkAccessMiddleware(BaseHTTPMiddleware):
    """Middleware to handle Private Network Access preflight requests."""

    async def dispatch(self, request: Request, call_next):
        # Handle preflight for Private Network Access
        if request.method == "OPTIONS":
            response = Response(status_code=204)
            response.headers["Access-Control-Allow-Origin"] = "*"
            response.headers["Access-Control-Allow-Methods"] = "*"
            response.headers["Access-Control-Allow-Headers"] = "*"
            response.headers["Access-Control-Allow-Private-Network"] = "true"
            return response

        response = await call_next(request)
        response.headers["Access-Control-Allow-Private-Network"] = "true"
        return response


# Create app
app = FastAPI(
    title="Colorblock Studio API",
    description="API for composing and exporting statement colorblocks",
    version="0.1.0",
)

# Private Network Access middleware (must be before CORS)
app.add_middleware(PrivateNetworkAccessMiddleware)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount static files for media (stored colorblock renders)
media_path = Path(settings.MEDIA_ROOT)
media_path.mkdir(parents=True, exist_ok=True)
app.mount("/media", StaticFiles(directory=str(media_path)), name="media")

# Include routers
app.include_router(projects.router, prefix="/projects", tags=["projects"])
app.include_router(statements.router, tags=["statements"])
app.include_router(colorblocks.router, prefix="/colorblocks", tags=["colorblocks"])


@app.middleware("http")
async def media_cache_middleware(request: Request, call_next):
    """Add caching headers for stored renders under /media.

    Renders are overwritten in place when a statement is re-rendered, so these
    are revalidated via ETag/Last-Modified rather than cached as immutable.
    """
    response = await call_next(request)
    path = request.url.path
    if path.startswith("/media/") and response.status_code == 200:
        file_path = media_path.joinpath(path[len("/media/"):])
        try:
            stat = file_path.stat()
        except OSError:
            return response
        from email.utils import formatdate

        response.headers["Cache-Control"] = "no-cache"
        response.headers.setdefault("Last-Modified", formatdate(stat.st_mtime, usegmt=True))
        response.headers.setdefault("ETag", f'W/"{stat.st_mtime:.0f}-{stat.st_size}"')
    return response


@app.on_event("startup")
def startup_event():
    """Initialize database tables on startup."""
    init_db()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Colorblock Studio API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
