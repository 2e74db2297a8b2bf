# src/prompt_ledger/main.py
"""Main entry point for the Prompt Ledger application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompt_ledger import __version__
from prompt_ledger.api.v1 import ledger_router, sessions_router, system_router
from prompt_ledger.api.v1.errors import ledger_error_handler
from prompt_ledger.core.settings import settings
from prompt_ledger.services.errors import LedgerError

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Initialize FastAPI app
app = FastAPI(
    title="Prompt Ledger API",
    description="Append-only, access-controlled ledger for prompts and responses",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.add_exception_handler(LedgerError, ledger_error_handler)

# Include API routers
app.include_router(ledger_router, prefix="/api/v1")
app.include_router(sessions_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": "Prompt Ledger API",
        "version": __version__,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("prompt_ledger.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
