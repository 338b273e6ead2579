# Load environment variables from .env file
from pathlib import Path
from contextlib import asynccontextmanager
import logging
from typing import Optional

from dotenv import load_dotenv

# Look for .env in backend/ first, then in parent directory
env_path = Path(__file__).parent.parent / ".env"
if not env_path.exists():
    env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cybersentry.routers import analysis_router, key_router
from cybersentry.core.config import settings, API_VERSION
from cybersentry.core.errors import ConfigError, CyberSentryError
from cybersentry.services.gemini_service import ClientSlot
from cybersentry.services.prompts import PROMPT_VERSION

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    
    Configures the LLM client from GEMINI_API_KEY when one is set, so the
    server can analyze without a /set-key call.
    """
    # Startup
    logger.info("Starting CyberSentry API...")
    
    slot: ClientSlot = app.state.llm_slot
    if settings.has_startup_key and not slot.is_configured:
        try:
            slot.set(settings.gemini_api_key)
            logger.info("Gemini API key: CONFIGURED from environment")
        except ConfigError as e:
            logger.error(f"Gemini API key from environment rejected: {e.message}")
    else:
        logger.info("Gemini API key: NOT CONFIGURED (POST /set-key to configure)")
    
    logger.info(f"CyberSentry API ready on port {settings.port}")
    
    yield
    
    # Shutdown
    logger.info("Shutting down CyberSentry API...")
    await slot.aclose()


# ---------- Error Handlers ----------


def _describe_validation_errors(errors: list) -> str:
    """Turn the first pydantic error into a short client-facing message."""
    if not errors:
        return "Invalid request body"
    
    first = errors[0]
    fields = [str(part) for part in first.get("loc", ()) if part != "body"]
    if not fields:
        return "Invalid request body"
    
    field = fields[-1]
    if first.get("type") == "missing":
        return f"{field} is required"
    return f"{field}: {first.get('msg', 'invalid value')}"


async def cybersentry_error_handler(request: Request, exc: CyberSentryError):
    """Typed pipeline errors carry their own status code."""
    if exc.status_code >= 500:
        logger.error(f"[ERROR] {request.method} {request.url.path}: {exc.message}")
    else:
        logger.warning(f"[ERROR] {request.method} {request.url.path} {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: Exception):
    """Body validation failures are reported as 400 with the offending field."""
    message = _describe_validation_errors(exc.errors())
    logger.warning(f"[ERROR] {request.method} {request.url.path} 400: {message}")
    return JSONResponse(status_code=400, content={"error": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Route not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def unhandled_error_handler(request: Request, exc: Exception):
    """Anything else is logged and hidden behind a generic message."""
    logger.error(
        f"[ERROR] Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ---------- Application ----------


def create_app(slot: Optional[ClientSlot] = None) -> FastAPI:
    """
    Build the FastAPI application.
    
    Args:
        slot: LLM client slot to use; a fresh Gemini-backed slot by default
    """
    app = FastAPI(
        title="CyberSentry API",
        description="LLM-assisted phishing email and security log analysis API",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.llm_slot = slot if slot is not None else ClientSlot()
    
    # CORS is open for the analysis endpoints
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    app.add_exception_handler(CyberSentryError, cybersentry_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(PydanticValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    
    # ---------- Routers ----------
    
    app.include_router(analysis_router)
    app.include_router(key_router)
    
    # Paths used by the original browser client
    app.include_router(analysis_router, prefix="/api", include_in_schema=False)
    app.include_router(key_router, prefix="/api", include_in_schema=False)
    
    # ---------- Root Endpoints ----------
    
    @app.get("/")
    def root():
        """Root endpoint with API info and status."""
        return {
            "message": "CyberSentry API is running",
            "status": "healthy",
            "version": API_VERSION,
        }
    
    @app.get("/health")
    def health_check():
        """Health check endpoint for monitoring."""
        return {"status": "healthy", "version": API_VERSION}
    
    @app.get("/status")
    def status(request: Request):
        """Detailed status endpoint showing configuration (never the key)."""
        return {
            "status": "healthy",
            "version": API_VERSION,
            "environment": settings.environment,
            "gemini": request.app.state.llm_slot.status(),
            "prompt_version": PROMPT_VERSION,
            "limits": {
                "max_upload_bytes": settings.max_upload_bytes,
                "max_prompt_chars": settings.max_prompt_chars,
                "llm_timeout_seconds": settings.gemini_timeout,
            },
        }
    
    return app


app = create_app()
