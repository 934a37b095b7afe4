"""
Main FastAPI application - double-entry ledger API.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ledgerapp.api.routers import entries, reports
from ledgerapp.application.book import LedgerBook
from ledgerapp.config import Settings
from ledgerapp.core.logging import setup_logging
from ledgerapp.domain.exceptions import LedgerError

logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"


def create_app(book: LedgerBook | None = None) -> FastAPI:
    """Build the app. Without a book, one is opened from settings at startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """Application lifespan - startup and shutdown events."""
        if getattr(app.state, "book", None) is None:
            settings = Settings.from_env()
            setup_logging(settings.log_level)
            app.state.book = LedgerBook.open(settings)
            logger.info("Ledger opened (%s storage)", settings.database_type)
        yield

    app = FastAPI(
        title="Ledger API",
        description="""
## Double-entry ledger

- **Accounts**: chart of accounts with normal balance sides
- **Journal entries**: validated, posted atomically, numbered without gaps
- **Reversals**: corrections are compensating entries, history is never edited
- **Reports**: point-in-time balances, period activity, trial balance
        """,
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.book = book

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(entries.router)
    app.include_router(reports.router)

    @app.get("/")
    def root():
        return {
            "name": "Ledger API",
            "version": API_VERSION,
            "docs": "/docs",
        }

    @app.get("/health")
    def health_check(request: Request):
        """Health check endpoint."""
        book = request.app.state.book
        return {
            "status": "healthy",
            "accounts": len(book.registry),
            "entries": book.ledger.last_sequence,
        }

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        """Map ledger errors to their HTTP status."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "code": exc.code},
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
