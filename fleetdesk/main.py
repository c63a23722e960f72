# fleetdesk/main.py
from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text

from fleetdesk.database import engine
from fleetdesk.inbox.errors import BannedAccount, MessageNotFound
from fleetdesk.logging_utils import logging_middleware
from fleetdesk.routes.auth import router as auth_router
from fleetdesk.routes.contact import router as contact_router
from fleetdesk.routes.inbox import router as inbox_router

app = FastAPI(title="Fleet Back Office", version="0.3.0")

app.middleware("http")(logging_middleware)

app.include_router(auth_router)
app.include_router(inbox_router)
app.include_router(contact_router)


@app.exception_handler(BannedAccount)
async def banned_handler(request: Request, exc: BannedAccount) -> JSONResponse:
    # terminal; the session is already gone
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": "Account banned"})


@app.exception_handler(MessageNotFound)
async def not_found_handler(request: Request, exc: MessageNotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Message not found"})


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/db-ping")
def db_ping() -> dict:
    with engine.connect() as conn:
        result = conn.execute(text("SELECT 1")).scalar_one()
    return {"db": "ok", "select_1": result}
