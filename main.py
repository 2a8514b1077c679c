import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from issuetracker import __version__
from issuetracker.database import init_db
from issuetracker.routers import auth, user, issue, conversation
from issuetracker.services.file_storage import file_storage
from issuetracker.utils.errors import register_exception_handlers

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="IssueTracker API", version=__version__)

# CORS configuration; any origin unless CORS_ORIGINS narrows it
origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials="*" not in origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Route registration
app.include_router(auth.router, tags=["Authentication"])
app.include_router(user.router, prefix="/users", tags=["Users"])
app.include_router(issue.router)
app.include_router(conversation.router)

# Startup event
@app.on_event("startup")
def startup_event():
    """Create tables and the upload directory before serving requests"""
    init_db()
    upload_dir = file_storage.ensure_upload_dir()
    logger.info(f"IssueTracker API started; uploads stored in {upload_dir}")

# Root route
@app.get("/")
def read_root():
    return {"status": "ok", "service": "IssueTracker API"}

@app.get("/health")
def health():
    return {"status": "ok"}
