# Name: __init__.py
# Description: Core module exports
# Date: 2026-10-12

from cybersentry.core.config import settings, get_settings, API_VERSION
from cybersentry.core.errors import (
    CyberSentryError,
    ValidationError,
    ConfigError,
    PayloadTooLarge,
    LLMError,
    NetworkError,
    InternalError,
)
from cybersentry.core.security import (
    mask_token,
    mask_pii_in_text,
    preview_for_log,
    sanitize_for_log,
    log_security_event,
)

__all__ = [
    "settings",
    "get_settings",
    "API_VERSION",
    "CyberSentryError",
    "ValidationError",
    "ConfigError",
    "PayloadTooLarge",
    "LLMError",
    "NetworkError",
    "InternalError",
    "mask_token",
    "mask_pii_in_text",
    "preview_for_log",
    "sanitize_for_log",
    "log_security_event",
]
