"""
FastAPI Server for the Cosmere Character Builder
- In-memory character sessions
- Catalogue loaded once at startup
"""

import sys
import time
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

# Add the backend directory to Python path for imports
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

from config.builder_settings import API_HOST, API_PORT, get_cors_origins
from config.logging_config import configure_logging
from fastapi_core.exceptions import (
    CharacterBuilderException,
    CharacterNotFoundException,
    CharacterLoadException,
)
from fastapi_models import HealthResponse

logger = configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the catalogue before the first request; close sessions on shutdown"""
    from gamedata.catalogue import get_game_data_catalogue
    from fastapi_core.session_registry import cleanup_all_sessions

    logger.info("FastAPI server starting up...")
    get_game_data_catalogue()

    yield

    logger.info("FastAPI server shutting down...")
    cleanup_all_sessions()


app = FastAPI(
    title="Cosmere Character Builder API",
    description="Character sheet builder with derived stats and compact save files",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)


class RequestTrackingMiddleware(BaseHTTPMiddleware):
    """Add request ID and timing for better error tracking"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(f"Request {request_id}: {request.method} {request.url.path} - {response.status_code} ({duration:.3f}s)")
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


app.add_middleware(RequestTrackingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# GLOBAL EXCEPTION HANDLERS
# ============================================================================

@app.exception_handler(CharacterNotFoundException)
def character_not_found_handler(request: Request, exc: CharacterNotFoundException):
    """Handle character not found errors"""
    logger.warning(f"Character not found: {exc.character_id}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "character_not_found",
            "detail": exc.message,
            "character_id": exc.character_id
        }
    )


@app.exception_handler(CharacterLoadException)
def character_load_handler(request: Request, exc: CharacterLoadException):
    """Handle save files that could not be loaded"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "load_failed",
            "detail": exc.message,
            "character_id": exc.character_id
        }
    )


@app.exception_handler(CharacterBuilderException)
def character_builder_handler(request: Request, exc: CharacterBuilderException):
    """Handle any other application error"""
    logger.error(f"Application error: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "application_error", "detail": exc.message}
    )


# ============================================================================
# ROUTERS
# ============================================================================

from fastapi_routers.character import router as character_router

app.include_router(character_router, prefix="/api")


@app.get("/api/health", response_model=HealthResponse)
def health_check():
    """Service health check"""
    from gamedata.catalogue import get_game_data_catalogue
    from fastapi_core.session_registry import get_active_sessions

    catalogue = get_game_data_catalogue()
    catalogue_loaded = bool(catalogue.skills)
    return HealthResponse(
        status="healthy" if catalogue_loaded else "degraded",
        service="cosmere-character-builder",
        active_sessions=len(get_active_sessions()),
        checks={"catalogue": catalogue_loaded},
    )


@app.get("/api/sessions")
def list_sessions():
    """Active editing sessions and whether they have unsaved changes"""
    from fastapi_core.session_registry import get_active_sessions
    return get_active_sessions()


def main():
    """Run the API with uvicorn"""
    logger.info(f"Starting character builder API on {API_HOST}:{API_PORT}")
    uvicorn.run(app, host=API_HOST, port=API_PORT, log_level="info")


if __name__ == "__main__":
    main()
