# fleetdesk/routes/auth.py
from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from passlib.context import CryptContext
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from fleetdesk.config import SESSION_HOURS
from fleetdesk.database import get_db
from fleetdesk.inbox.errors import BannedAccount
from fleetdesk.inbox.identity import SessionContext, sql_resolver
from fleetdesk.inbox.messages import Identity, Role
from fleetdesk.models.account import Account
from fleetdesk.models.session import SessionToken

bearer_scheme = HTTPBearer()
router = APIRouter(prefix="/auth", tags=["auth"])

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def _check_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v or v.startswith("@") or v.endswith("@"):
        raise ValueError("invalid email address")
    return v


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=8, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)


class RegisterResponse(BaseModel):
    account_id: int
    email: str


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    role: str


class MeResponse(BaseModel):
    account_id: int
    email: str
    role: str
    entity_id: Optional[int] = None
    display_name: str = ""


def _now_utc_naive() -> datetime:
    # Naive UTC datetime (no tzinfo). Works cleanly with SQLite.
    return datetime.utcnow()


def _session_context(sess: SessionToken) -> SessionContext:
    cached = None
    if sess.role:
        cached = Identity(
            role=Role(sess.role),
            entity_id=sess.entity_id,
            display_name=sess.display_name or "",
        )
    return SessionContext(email=sess.account.email, identity=cached)


def _save_identity(sess: SessionToken, ctx: SessionContext) -> None:
    ident = ctx.identity
    sess.role = ident.role.value if ident else None
    sess.entity_id = ident.entity_id if ident else None
    sess.display_name = ident.display_name if ident else None


def get_current_session(
    creds: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> SessionToken:
    token = creds.credentials

    sess = db.query(SessionToken).filter(SessionToken.token == token).first()
    if not sess:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    if sess.expires_at <= _now_utc_naive():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")

    return sess


async def get_identity(
    request: Request,
    sess: SessionToken = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> Identity:
    """
    Resolve (or reuse the cached) role for this session.
    A ban ends the session: the row is deleted and BannedAccount raised.
    """
    ctx = _session_context(sess)
    was_cached = ctx.identity is not None

    identity = await sql_resolver(db).resolve(ctx)

    if ctx.terminated:
        def _end() -> None:
            db.delete(sess)
            db.commit()

        await run_in_threadpool(_end)
        raise BannedAccount(ctx.email)

    if not was_cached and ctx.identity is not None:
        def _persist() -> None:
            _save_identity(sess, ctx)
            db.commit()

        await run_in_threadpool(_persist)

    log_extra = getattr(request.state, "log_extra", None)
    if isinstance(log_extra, dict):
        log_extra["role"] = identity.role.value
    return identity


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session = Depends(get_db)) -> RegisterResponse:
    existing = db.query(Account).filter(Account.email == payload.email).first()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    account = Account(
        email=payload.email,
        password_hash=pwd_context.hash(payload.password),
    )
    db.add(account)
    db.commit()
    db.refresh(account)

    return RegisterResponse(account_id=account.id, email=account.email)


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: Session = Depends(get_db)) -> LoginResponse:
    email = payload.email.strip().lower()

    def _check() -> Optional[Account]:
        account = db.query(Account).filter(Account.email == email).first()
        if not account or not pwd_context.verify(payload.password, account.password_hash):
            return None
        return account

    account = await run_in_threadpool(_check)
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    # Sign-in resolves the role before any session exists
    ctx = SessionContext(email=account.email)
    identity = await sql_resolver(db).resolve(ctx)
    if ctx.terminated:
        raise BannedAccount(account.email)

    token = secrets.token_hex(32)
    expires_at = _now_utc_naive() + timedelta(hours=SESSION_HOURS)

    sess = SessionToken(
        account_id=account.id,
        token=token,
        created_at=_now_utc_naive(),
        expires_at=expires_at,
    )
    _save_identity(sess, ctx)

    def _persist() -> None:
        db.add(sess)
        db.commit()

    await run_in_threadpool(_persist)

    return LoginResponse(token=token, expires_at=expires_at, role=identity.role.value)


@router.post("/logout")
def logout(
    sess: SessionToken = Depends(get_current_session),
    db: Session = Depends(get_db),
) -> dict:
    # Dropping the row drops the cached role with it
    db.delete(sess)
    db.commit()
    return {"ok": True}


@router.get("/me", response_model=MeResponse)
def me(
    sess: SessionToken = Depends(get_current_session),
    identity: Identity = Depends(get_identity),
) -> MeResponse:
    return MeResponse(
        account_id=sess.account_id,
        email=sess.account.email,
        role=identity.role.value,
        entity_id=identity.entity_id,
        display_name=identity.display_name,
    )
