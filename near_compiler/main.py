"""FastAPI application for the NEAR contract compiler."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .models import HealthResponse
from .routes import compile_router, templates_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    logger.info(
        "Starting %s on http://%s:%s", settings.service_name, settings.host, settings.port
    )
    yield


app = FastAPI(
    title="NEAR Contract Compiler",
    description="Compiles NEAR smart contracts written in Rust to wasm",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(compile_router, tags=["compile"])
app.include_router(templates_router, tags=["templates"])


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", service=settings.service_name)


def run():
    """Entry point for near-compiler command."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
