"""ADRULE — FastAPI Application Entry Point.

Rule compiler service: renders automation rules as JIKA ... MAKA summaries,
dry-runs their conditions and relays rule documents to the rules backend.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adrule import __version__
from adrule.api.rule_routes import router as rule_router
from adrule.config import settings
from adrule.core.logging import get_logger

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("ADRULE starting up...")
    logger.info(f"Rules backend: {settings.rules_api_base_url}")
    yield
    logger.info("ADRULE shut down")


app = FastAPI(
    title="ADRULE",
    description="Compiles Shopee ads automation rules into readable summaries and dry-runs them.",
    version=__version__,
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(rule_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "adrule",
        "version": __version__,
    }
