# Name: config.py
# Description: Application configuration and environment variable management
# Date: 2026-10-12

import os
from typing import Optional
from functools import lru_cache


# =============================================================================
# API VERSION - Single source of truth
# =============================================================================
# Versioning policy (Semantic Versioning):
#   - MAJOR: Breaking changes to request/response schemas
#   - MINOR: New features, new optional fields (backward compatible)
#   - PATCH: Bug fixes, documentation updates

API_VERSION = "1.0.0"

# Upload hard cap (10 MiB)
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

# Characters of user content forwarded to the LLM per call
DEFAULT_MAX_PROMPT_CHARS = 1500


def _int_env(name: str, default: int) -> int:
    """Read an integer environment variable, falling back on bad values."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class Settings:
    """
    Application settings loaded from environment variables.
    
    Attributes:
        environment: Current environment (development, production)
        host: Interface the HTTP server binds to
        port: Port the HTTP server listens on
        gemini_api_key: Optional key used to configure the LLM at startup
        gemini_model: Fixed Gemini model identifier
        gemini_timeout: Outbound LLM call timeout in seconds
        max_upload_bytes: Largest accepted log upload
        max_prompt_chars: Truncation cap for user content in prompts
        cors_origins: Allowed CORS origins
    """
    
    def __init__(self):
        # Environment
        self.environment: str = os.getenv("ENVIRONMENT", "development")
        
        # Server
        self.host: str = os.getenv("HOST", "0.0.0.0")
        self.port: int = _int_env("PORT", 8000)
        
        # Gemini settings
        self.gemini_api_key: Optional[str] = os.getenv("GEMINI_API_KEY") or None
        self.gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
        self.gemini_timeout: int = _int_env("GEMINI_TIMEOUT", 60)
        
        # Limits
        self.max_upload_bytes: int = _int_env("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
        self.max_prompt_chars: int = _int_env("MAX_PROMPT_CHARS", DEFAULT_MAX_PROMPT_CHARS)
        
        # CORS
        self._cors_origins: str = os.getenv("CORS_ORIGINS", "*")
    
    @property
    def cors_origins(self) -> list[str]:
        """Allowed origins as a list; '*' means any origin."""
        origins = [o.strip() for o in self._cors_origins.split(",") if o.strip()]
        return origins or ["*"]
    
    @property
    def has_startup_key(self) -> bool:
        """Check if an API key was supplied through the environment."""
        return bool(self.gemini_api_key)
    
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    
    Uses lru_cache to avoid re-reading environment variables on every call.
    """
    return Settings()


# Global settings instance for easy import
settings = get_settings()
