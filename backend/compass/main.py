from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import os
from datetime import datetime

from compass.core.config import settings
from compass.routers import (
    me,
    profile,
    recommendations,
    assessments,
    tools,
    dashboard,
    ai,
    events,
    admin,
)
from compass.database import init_db

# ----------------------------
# Logging
# ----------------------------
logger = logging.getLogger("compass")
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Server fingerprint for debugging
SERVER_BOOT_ID = f"compass-backend::{os.getpid()}::{datetime.utcnow().isoformat()}"

app = FastAPI(title="Compass API", debug=settings.DEBUG)

BUILD_ID = os.getenv("BUILD_ID", "missing")


# ----------------------------
# CORS
# ----------------------------
cors_origins = settings.cors_origins_list
logger.info("[CORS] allow_origins=%s", cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_build_header(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Compass-Build"] = BUILD_ID
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("[UNHANDLED] %s %s", request.method, request.url.path)

    response = JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"}
    )

    # Ensure CORS headers are present in error responses
    origin = request.headers.get("origin")
    if origin and origin in cors_origins:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        response.headers["Access-Control-Allow-Methods"] = "*"
        response.headers["Access-Control-Allow-Headers"] = "*"

    return response


# ----------------------------
# Routers
# ----------------------------
app.include_router(me.router, prefix="/api")
app.include_router(profile.router, prefix="/api")
app.include_router(recommendations.router, prefix="/api")
app.include_router(assessments.router, prefix="/api")
app.include_router(tools.router, prefix="/api")
app.include_router(dashboard.router, prefix="/api")
app.include_router(ai.router, prefix="/api")
app.include_router(events.router, prefix="/api")
app.include_router(admin.router, prefix="/admin")


@app.on_event("startup")
def on_startup() -> None:
    logger.info("[BOOT] %s environment=%s", SERVER_BOOT_ID, settings.ENVIRONMENT)
    init_db()


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/api/health")
def api_health_check():
    return {"status": "ok"}


@app.get("/api/_debug/server-id")
def server_id():
    return {"server_id": SERVER_BOOT_ID, "build_id": BUILD_ID}
