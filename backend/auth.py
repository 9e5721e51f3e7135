# auth.py

import logging
import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import jwt, JWTError
from passlib.context import CryptContext

from constants.station_config import (
    NO_DELETE_ROLES,
    ROLE_PASSWORDS,
    ROLE_SUPERVISOR,
    ROLES,
    STATION_ID,
    SUPERVISOR_ENTRY_LIMIT,
)
from schemas.auth import RoleLogin, SessionContext, Token

logger = logging.getLogger(__name__)

# ======================================================
# JWT CONFIG
# ======================================================

SECRET_KEY = os.getenv("FUEL_SECRET_KEY", "FUEL_STATION_SECRET_KEY_CHANGE_THIS")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("FUEL_TOKEN_MINUTES", 60 * 12))  # 12 hours token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    password = password.strip()
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password.strip(), hashed_password)


# one hashed password per role, built once at import
ROLE_PASSWORD_HASHES: Dict[str, str] = {
    role: hash_password(pw) for role, pw in ROLE_PASSWORDS.items()
}

# ======================================================
# SESSION CONTEXT
# ======================================================

class SessionRegistry:
    """Live session contexts: created at sign-in, dropped at sign-out."""

    def __init__(self):
        self._sessions: Dict[str, SessionContext] = {}

    def open(self, role: str, station_id: str = STATION_ID) -> SessionContext:
        ctx = SessionContext(
            session_id=uuid.uuid4().hex,
            role=role,
            station_id=station_id,
            issued_at=datetime.now(timezone.utc),
        )
        self._sessions[ctx.session_id] = ctx
        return ctx

    def get(self, session_id: str) -> Optional[SessionContext]:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self):
        return len(self._sessions)


sessions = SessionRegistry()


def can_delete(ctx: SessionContext) -> bool:
    return ctx.role not in NO_DELETE_ROLES


def entry_limit(ctx: SessionContext) -> Optional[int]:
    # Supervisor only sees the latest entries; the other roles see all
    return SUPERVISOR_ENTRY_LIMIT if ctx.role == ROLE_SUPERVISOR else None

# ======================================================
# JWT CREATION
# ======================================================

def create_access_token(data: dict, expires_delta: int = ACCESS_TOKEN_EXPIRE_MINUTES):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=expires_delta)

    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


# ======================================================
# LOGIN
# ======================================================

def authenticate_role(role: str, password: str) -> bool:
    hashed = ROLE_PASSWORD_HASHES.get(role)
    if hashed is None:
        return False
    return verify_password(password, hashed)


def login_for_access_token(form_data: RoleLogin) -> Token:
    if form_data.role not in ROLES or not authenticate_role(form_data.role, form_data.password):
        logger.warning(f"Failed login for role '{form_data.role}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect role or password",
        )

    ctx = sessions.open(form_data.role)
    logger.info(f"🔑 {ctx.role} signed in")

    access_token = create_access_token(
        data={
            "sub": ctx.role,
            "sid": ctx.session_id,
        }
    )

    return Token(access_token=access_token, role=ctx.role)


# ======================================================
# GET CURRENT SESSION (DEPENDENCY)
# ======================================================

async def get_current_session(token: str = Depends(oauth2_scheme)) -> SessionContext:

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])

        session_id: str = payload.get("sid")

        if session_id is None:
            raise credentials_exception

    except JWTError:
        raise credentials_exception

    ctx = sessions.get(session_id)
    if ctx is None:
        # signed out or server restarted
        raise credentials_exception

    return ctx


# ======================================================
# ROLE CHECK (DELETE)
# ======================================================

async def delete_allowed(ctx: SessionContext = Depends(get_current_session)) -> SessionContext:
    if not can_delete(ctx):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have permission to delete entries."
        )
    return ctx
