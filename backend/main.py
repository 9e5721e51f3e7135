# main.py
import logging

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

from database import create_tables
from auth import (
    can_delete,
    entry_limit,
    get_current_session,
    login_for_access_token,
    sessions,
)
from schemas.auth import RoleLogin, SessionContext, SessionOut, Token

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Fuel Station Daily Sales Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from routers import sales
app.include_router(sales.router)

from routers import reports
app.include_router(reports.router)


@app.get("/")
def read_root():
    return {"message": "Fuel station sales API running"}

@app.on_event("startup")
async def on_startup():
    print("🔄 Initializing database...")
    await create_tables()
    sales.pending_deletes.start()
    print("🚀 Startup initialization complete.")

@app.on_event("shutdown")
async def on_shutdown():
    sales.pending_deletes.shutdown()

# ---------------------------
# AUTH ENDPOINTS
# ---------------------------
@app.post("/api/auth/login", response_model=Token)
async def login(form_data: RoleLogin):
    return login_for_access_token(form_data)

@app.post("/api/auth/logout")
async def logout(ctx: SessionContext = Depends(get_current_session)):
    sessions.close(ctx.session_id)
    logger.info(f"{ctx.role} signed out")
    return {"message": "Signed out"}

@app.get("/api/auth/me", response_model=SessionOut)
async def who_am_i(ctx: SessionContext = Depends(get_current_session)):
    return SessionOut(
        role=ctx.role,
        station_id=ctx.station_id,
        issued_at=ctx.issued_at,
        can_delete=can_delete(ctx),
        entry_limit=entry_limit(ctx),
    )
