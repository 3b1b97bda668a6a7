"""
Watchlist Tracker — FastAPI application entry point.

Registers the routers, the error envelope, static files at the root,
and a liveness route so whatever supervises us knows we're alive.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from app.config import get_settings
from app.database import close_db, init_db
from app.routers import quotes, watchlists
from app.schemas.api import ApiError, ErrorResponse, HealthResponse

VERSION = "0.1.0"

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting watchlist server...")
    if settings.db_create_tables:
        await init_db()
        logger.info("Database tables ensured.")
    yield
    logger.info("Shutting down...")
    await close_db()


app = FastAPI(
    title="Watchlist Tracker",
    description="Named stock watchlists and their performance since each symbol was added.",
    version=VERSION,
    lifespan=lifespan,
)


# ── Error envelope ─────────────────────────────────────────────────────────
def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_response().model_dump())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Bad path ids / unparseable bodies are client errors like any other: 400, same envelope
    body = ErrorResponse(error="Invalid request", detail=jsonable_errors(exc))
    return JSONResponse(status_code=400, content=body.model_dump())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    body = ErrorResponse(error="Internal server error")
    return JSONResponse(status_code=500, content=body.model_dump())


# ── Routers ────────────────────────────────────────────────────────────────
app.include_router(quotes.router, prefix="/quote", tags=["quotes"])
app.include_router(watchlists.router, prefix="/watchlists", tags=["watchlists"])


# ── Health check ───────────────────────────────────────────────────────────
@app.get("/", response_class=PlainTextResponse, tags=["health"])
async def root() -> str:
    return "Watchlist server is running."


@app.get("/health", response_model=HealthResponse, tags=["health"])
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=VERSION,
        finnhub_configured=settings.finnhub_configured(),
    )


# ── Static files ───────────────────────────────────────────────────────────
# Mounted last so the API routes above take precedence over files at the root.
if settings.static_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
else:
    logger.warning(f"Static directory {settings.static_dir} not found; not serving static files.")


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
