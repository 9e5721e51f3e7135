from datetime import datetime

from pydantic import BaseModel


class RoleLogin(BaseModel):
    role: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    role: str


class SessionContext(BaseModel):
    session_id: str
    role: str
    station_id: str
    issued_at: datetime


class SessionOut(BaseModel):
    role: str
    station_id: str
    issued_at: datetime
    can_delete: bool
    entry_limit: int | None = None
