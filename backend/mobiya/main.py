"""
Mobiya Assistant - FastAPI Application
======================================
Main entry point configuring:
- uvloop for high-performance async (non-Windows)
- Application lifespan to initialize logging, the DB and the detection providers
- CORS, API key middleware, and API routers (/api Chat, Classify, QA)
- Health check endpoints (/, /health)
"""

import sys
import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mobiya.config import settings
from mobiya.api import chat, classify, qa
from mobiya.logger import setup_logger
from mobiya.middleware.auth import APIKeyMiddleware
from mobiya.services.orchestrator import orchestrator
from mobiya.services.provider_registry import provider_registry
from mobiya.models.database import init_db
import logging

logger = logging.getLogger(__name__)

# uvloop is not supported on Windows
if sys.platform != "win32":
    try:
        import uvloop
        asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
        logger.info("Using uvloop event loop")
    except ImportError:
        logger.warning("uvloop not available, using default event loop")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - On startup: configure logging, create tables, and load the detection
      providers once in a worker thread so the first request does not pay
      for the imports.
    - On shutdown: log a shutdown message.

    Embedding and Chroma services stay lazy; they load on the first message
    that reaches vector search.
    """
    setup_logger(
        "mobiya",
        log_dir=settings.log_dir or None,
        level="DEBUG" if settings.debug_mode else settings.log_level
    )
    logger.info(f"Starting {settings.brand_name} assistant...")

    await init_db()
    logger.info("Database initialized")

    await asyncio.to_thread(orchestrator.gate.providers.warm_up)
    logger.info(f"Detection providers: {provider_registry.status()}")

    yield

    logger.info(f"Shutting down {settings.brand_name} assistant...")


app = FastAPI(
    title="Mobiya Assistant API",
    description=f"Retrieval-gated assistant for {settings.brand_name}",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Protects all /api/* routes by enforcing X-API-Key header
app.add_middleware(APIKeyMiddleware)

app.include_router(chat.router, prefix="/api", tags=["Chat"])
app.include_router(classify.router, prefix="/api", tags=["Classify"])
app.include_router(qa.router, prefix="/api", tags=["QA"])


@app.get("/")
async def root():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "Mobiya Assistant",
        "version": "1.0.0"
    }


@app.get("/health")
async def health_check():
    """Detailed health check, including which detection providers loaded"""
    return {
        "status": "healthy",
        "embedding_model": settings.embedding_model,
        "llm_model": settings.llm_model,
        "chroma_collection": settings.chroma_collection_name,
        "providers": provider_registry.status()
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "mobiya.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
