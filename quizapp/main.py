# quizapp/main.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from quizapp.core.db import init_db
from quizapp.core.exceptions import register_exception_handlers
from quizapp.core.logging import setup_logging
from quizapp.core.settings import settings

# --- Routers ---
from quizapp.routers.admin import router as admin_router
from quizapp.routers.health import router as health_router
from quizapp.routers.progress import router as progress_router
from quizapp.routers.quizzes import router as quizzes_router
from quizapp.routers.results import router as results_router

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# FastAPI app
# -----------------------------------------------------------------------------
API_PREFIX = "/api/quiz"

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    root_path=settings.ROOT_PATH,
)

# -----------------------------------------------------------------------------
# CORS
# -----------------------------------------------------------------------------
ALLOW_ALL_CORS = settings.ALLOW_ALL_CORS or settings.DEBUG
LOCALHOST_REGEX = r"http://(localhost|127\.0\.0\.1):\d+$"

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if ALLOW_ALL_CORS else settings.CORS_ORIGINS,
    allow_origin_regex=".*" if ALLOW_ALL_CORS else LOCALHOST_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=86400,
)


# -----------------------------------------------------------------------------
# JSON UTF-8 middleware
# -----------------------------------------------------------------------------
@app.middleware("http")
async def force_utf8_content_type(request: Request, call_next):
    response = await call_next(request)
    ct = response.headers.get("content-type", "")
    if "application/json" in ct.lower() and "charset=" not in ct.lower():
        response.headers["content-type"] = "application/json; charset=utf-8"
    return response


register_exception_handlers(app)

# -----------------------------------------------------------------------------
# Register routers
# -----------------------------------------------------------------------------
app.include_router(health_router)
app.include_router(quizzes_router,  prefix=API_PREFIX)
app.include_router(results_router,  prefix=API_PREFIX)
app.include_router(progress_router, prefix=API_PREFIX)
app.include_router(admin_router,    prefix=API_PREFIX)


@app.get("/")
def root():
    return {
        "ok": True,
        "service": settings.PROJECT_NAME,
        "prefix": API_PREFIX,
        "docs": "/docs",
        "build": settings.BUILD_TAG,
    }


@app.get(f"{API_PREFIX}/_routes")
def list_routes(request: Request):
    out: List[Dict[str, Any]] = []
    for r in request.app.router.routes:
        out.append({"path": getattr(r, "path", str(r)), "methods": sorted(getattr(r, "methods", None) or [])})
    return out


@app.on_event("startup")
def on_startup():
    init_db()
    logger.info("%s %s started (build=%s)", settings.PROJECT_NAME, settings.VERSION, settings.BUILD_TAG)


# -----------------------------------------------------------------------------
# Lambda handler
# -----------------------------------------------------------------------------
handler = Mangum(app)
