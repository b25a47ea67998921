"""
FastAPI API Server.

REST API over the doctor directory: search with filter options,
next-available slot resolution and patient-to-clinic distance.

Start with:
    uvicorn doctor_finder.api_server:app --reload --port 8000
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv
load_dotenv(".env.local")

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from doctor_finder.api.doctors import router as doctors_router
from doctor_finder.api.middleware import RequestIdMiddleware
from doctor_finder.logging_config import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle hooks."""
    logger.info("api_server_starting")
    yield
    logger.info("api_server_stopping")


app = FastAPI(
    title="Doctor Finder API",
    description="Doctor search, availability and distance lookups for patients",
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware (order matters — outermost first)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(doctors_router)


@app.get("/health", tags=["System"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok", "service": "doctor-finder"}


@app.get("/", tags=["System"])
async def root() -> dict[str, str]:
    """API root."""
    return {
        "service": "Doctor Finder",
        "version": "0.1.0",
        "docs": "/docs",
    }
