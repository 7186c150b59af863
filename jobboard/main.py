"""
Campus Job Board - Main Application

FastAPI backend with:
- PostgreSQL for users, profiles, jobs, applications and saved jobs
- JWT authentication for students and employers
- Local directory for uploaded resumes, served from /uploads

Run: uvicorn jobboard.main:app --reload
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from jobboard import __version__
from jobboard.api.routes import api_router
from jobboard.core.config import get_settings
from jobboard.core.errors import register_exception_handlers
from jobboard.core.logging_config import configure_logging
from jobboard.db.postgres import test_postgres_connection

settings = get_settings()
configure_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Campus Job Board",
    description="""
    Internship and entry-level job board connecting students and employers.

    ## Features
    - **Authentication**: JWT-based sign-up/sign-in for students and employers
    - **Jobs**: Employers post and delete listings; anyone can browse active ones
    - **Students**: Apply once per job, save/unsave jobs, upload a resume
    - **Employers**: Review applicants for their own postings
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")

# Serve uploaded resumes
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount(settings.upload_url_prefix, StaticFiles(directory=settings.upload_dir), name="uploads")


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "Campus Job Board", "version": __version__}


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    connected = test_postgres_connection()
    if not connected:
        logger.warning("Health check: database unreachable")
    return {
        "status": "healthy" if connected else "degraded",
        "database": "connected" if connected else "disconnected"
    }
