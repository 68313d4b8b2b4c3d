# app/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, and all registry routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import zones, equipment, commands, counters, health
from app.database import SessionLocal, create_tables
from app.config import settings
from app.services.change_publisher import LoggingChangePublisher
from app.services.command_service import publish_all
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Iztiar Registry API",
    description="Zones, equipments and commands inventory with monotonic identifiers.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Broker client is external; replace app.state.publisher to wire one in
app.state.publisher = LoggingChangePublisher()

# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth.
    Health check and docs stay open. Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Malformed payloads answer with the ERR envelope ──────────────────────────
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    reasons = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()) if p != 'body')}: {e.get('msg')}"
        for e in exc.errors()
    )
    logger.info(f"Rejected payload on {request.url.path}: {reasons}")
    return JSONResponse(status_code=status.HTTP_200_OK, content={"ERR": f"Invalid request: {reasons}"})


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(zones.router,     prefix="/api/v1", tags=["Zones"])
app.include_router(equipment.router, prefix="/api/v1", tags=["Equipments"])
app.include_router(commands.router,  prefix="/api/v1", tags=["Commands"])
app.include_router(counters.router,  prefix="/api/v1", tags=["Counters"])
app.include_router(health.router,    prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Iztiar Registry starting up...")
    create_tables()
    logger.info("Database tables ready")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")

    if settings.PUBLISH_ON_STARTUP:
        db = SessionLocal()
        try:
            await publish_all(db, app.state.publisher)
        finally:
            db.close()


@app.on_event("shutdown")
async def shutdown():
    logger.info("Iztiar Registry shutting down...")
