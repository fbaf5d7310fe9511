"""
ForsaLink - Main Application

FastAPI backend with:
- PostgreSQL via raw parameterized SQL
- JWT authentication for students and companies
- Jobs, applications, bookmarks, notifications and messaging

Run: uvicorn app.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.api.routes import api_router
from app.core.config import get_settings
from app.core.logging import setup_logging
from app.db.schema import init_db

settings = get_settings()
setup_logging()

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="ForsaLink API",
    description="""
    Job board connecting students and companies.

    ## Features
    - **Authentication**: JWT-based auth for students and companies
    - **Jobs**: Companies post jobs, students browse and apply
    - **Applications**: Companies accept or reject, students get notified
    - **Bookmarks**: Students save jobs for later
    - **Notifications**: Per-user inbox with unread counts
    - **Messaging**: Opens once an application is accepted
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (the mobile client calls from anywhere)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything a route didn't turn into an HTTPException becomes a generic 500."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong!"})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create missing tables on startup."""
    try:
        init_db()
        logger.info("Database tables ready")
    except Exception as e:
        logger.warning("Database initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"message": "ForsaLink API is running!"}


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    from app.db.postgres import test_postgres_connection

    connected = test_postgres_connection()
    return {
        "status": "healthy" if connected else "degraded",
        "version": __version__,
        "database": "connected" if connected else "disconnected"
    }
