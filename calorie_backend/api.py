# -*- coding: utf-8 -*-
"""
Calorie tracker API

User registration with admin approval, daily food log, and photo-based
nutrition estimates.
"""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .app_db import init_app_db
from .auth.api import router as auth_router
from .auth.api import seed_admin_user
from .auth.security import get_current_user_from_request
from .config import settings
from .food.api import router as food_router
from .motivation.api import router as motivation_router
from .users.api import router as users_router

app = FastAPI(
    title="Calorie Tracker",
    description="Calorie/protein tracking with photo-based nutrition estimates",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _init_storage() -> None:
    init_app_db(settings.db_path)
    settings.uploads_dir.mkdir(parents=True, exist_ok=True)
    seed_admin_user()


@app.on_event("startup")
def _startup_init_db() -> None:
    _init_storage()


# Ensure the DB exists even when lifespan events are not triggered (e.g. some test clients).
_init_storage()


_AUTH_EXEMPT_PREFIXES = (
    "/api/login",
    "/api/register",
    "/api/health",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
)


@app.middleware("http")
async def _auth_gate(request: Request, call_next):
    path = request.url.path
    if path.startswith("/api") and not any(path.startswith(p) for p in _AUTH_EXEMPT_PREFIXES):
        try:
            user = get_current_user_from_request(request)
            request.state.user = user
        except HTTPException as exc:
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
    return await call_next(request)


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(food_router)
app.include_router(motivation_router)

app.mount("/uploads", StaticFiles(directory=str(settings.uploads_dir)), name="uploads")


@app.get("/api/health")
def health():
    return {"status": "ok"}


def run() -> None:
    """Console entry point (used by pyproject [project.scripts])."""
    import uvicorn

    try:
        port = int(settings.port_raw)
    except ValueError:
        port = 8000

    uvicorn.run("calorie_backend.api:app", host=settings.host, port=port, reload=False)
