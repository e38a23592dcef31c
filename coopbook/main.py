from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from coopbook.api import backup, funds, loans, maturity, members, passbook, reports, settings as settings_api
from coopbook.core.config import settings
from coopbook.services.engine import LedgerEngine, build_state_port
from coopbook.services.persistence import StatePort
from coopbook.services.scheduler import get_scheduler_status, start_scheduler, stop_scheduler
import logging

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(state_port: Optional[StatePort] = None, enable_scheduler: Optional[bool] = None) -> FastAPI:
    """Build the API around one ledger engine."""
    if state_port is None and settings.STATE_BACKEND == "sql":
        from coopbook.db.base import Base, engine as db_engine
        import coopbook.models  # noqa: F401
        Base.metadata.create_all(bind=db_engine)

    ledger = LedgerEngine(state_port or build_state_port())
    run_scheduler = settings.ENABLE_SCHEDULER if enable_scheduler is None else enable_scheduler

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting Cooperative Society Ledger API at revision {ledger.state.revision}")
        if run_scheduler:
            start_scheduler(ledger)
        yield
        if run_scheduler:
            stop_scheduler()

    app = FastAPI(
        title="Cooperative Society Ledger API",
        description="Member passbooks, loans, fund ledgers and audit reports",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.ledger = ledger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(members.router)
    app.include_router(passbook.router)
    app.include_router(loans.router)
    app.include_router(funds.router)
    app.include_router(maturity.router)
    app.include_router(reports.router)
    app.include_router(backup.router)
    app.include_router(settings_api.router)

    @app.get("/")
    def root():
        """Root endpoint."""
        return {"message": "Cooperative Society Ledger API", "version": VERSION}

    @app.get("/api/health")
    def health_check():
        """Health check: state revision and scheduler status."""
        return {
            "status": "healthy",
            "version": VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "revision": ledger.state.revision,
            "backend": type(ledger.store.port).__name__,
            "scheduler": get_scheduler_status(),
        }

    return app


app = create_app()
