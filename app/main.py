"""
Radio Calico - FastAPI Application

Backend for the Radio Calico web player: song voting, listener
registration and a parsed now-playing feed.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.database import engine, init_models
from app.core.errors import RadioError
from app.routers.songs import router as songs_router
from app.routers.users import router as users_router
from app.routers.now_playing import router as now_playing_router
from app.routers.health import router as health_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle startup and shutdown events."""
    # Create tables on startup (for development)
    await init_models(engine)
    yield
    # Cleanup on shutdown
    await engine.dispose()


app = FastAPI(
    title="Radio Calico",
    description="Song voting and now-playing API for the Radio Calico web player",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RadioError)
async def radio_error_handler(request: Request, exc: RadioError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies and path params are client errors, same as missing fields
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    logger.debug(message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


# Include routers
app.include_router(songs_router)
app.include_router(users_router)
app.include_router(now_playing_router)
app.include_router(health_router)


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
