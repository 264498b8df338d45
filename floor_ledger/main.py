"""FastAPI entrypoint for the floor and order ledger."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from floor_ledger.api.v1.api import api_router
from floor_ledger.core.config import settings
from floor_ledger.db import session as db_session
from floor_ledger.db.base import Base
from floor_ledger.services.errors import PreconditionFailedError
from floor_ledger.services.ledger_service import FloorLedger
from floor_ledger.services.persistence_service import load_ledger_state, save_ledger_state

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


def build_ledger() -> FloorLedger:
    """Restore the ledger from storage, seeding the default floor on first run.

    An unreadable stored state raises and nothing is written over it.
    """
    Base.metadata.create_all(bind=db_session.engine)
    with db_session.SessionLocal() as session:
        state = load_ledger_state(session)
        ledger = FloorLedger(state)
        logger.info("[BOOTSTRAP] Ledger state %s", "restored" if state is not None else "created")
        if settings.seed_default_tables and ledger.seed_default_tables():
            save_ledger_state(session, ledger.state)
    return ledger


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    application.state.ledger = build_ledger()
    yield


app = FastAPI(title="Floor & Order Ledger", lifespan=lifespan)
app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(PreconditionFailedError)
async def precondition_failed_handler(request: Request, exc: PreconditionFailedError) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "app": settings.app_name}
