from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from pathlib import Path

from lifetracker.database import engine, Base
from lifetracker import models  # Import all models to register them with Base
from lifetracker.auth import is_default_api_key
from lifetracker.routes import router
from lifetracker.scheduler import start_scheduler, stop_scheduler
from lifetracker.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV, CORS_ALLOWED_ORIGINS
)

LOG_DIR = os.getenv("LIFETRACKER_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("LIFETRACKER_LOG_FILE", "app.log")
SCHEDULER_ENABLED = os.getenv("LIFETRACKER_SCHEDULER_ENABLED", "true").lower() == "true"

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("lifetracker")

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Life Tracker API",
    description="Activity tracking with daily points, weekly bonus and streaks",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Life Tracker API started. Logging to: {log_path}")
    if is_default_api_key():
        logger.warning("LIFETRACKER_API_KEY is not set, using the default key")
    if SCHEDULER_ENABLED:
        start_scheduler()


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Life Tracker API")
    stop_scheduler()


# Health check (no auth required)
@app.get("/")
async def root():
    return {"message": "Life Tracker API", "status": "active"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("lifetracker.main:app", host="0.0.0.0", port=8000, reload=False)
