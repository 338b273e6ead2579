# Name: security.py
# Description: Security utilities for logging and data protection
# Date: 2026-10-12

import re
import logging

from cybersentry.core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# PII PATTERNS
# =============================================================================

# Email pattern
EMAIL_PATTERN = re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')

# Phone patterns (various formats)
PHONE_PATTERN = re.compile(r'\b(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}\b')

# Credit card patterns (basic)
CC_PATTERN = re.compile(r'\b(?:\d{4}[-.\s]?){3}\d{4}\b')

# Keys that never reach the log
SENSITIVE_KEYS = {'apikey', 'api_key', 'password', 'secret', 'token'}

# Free-text user content fields
BODY_KEYS = {'emailcontent', 'email_content', 'logcontent', 'log_content', 'logline', 'log_line'}


# =============================================================================
# MASKING FUNCTIONS
# =============================================================================

def mask_token(token: str, visible_chars: int = 4) -> str:
    """
    Mask an API key or token for safe logging.
    
    Example: "AIzaSyD93kx..." -> "AIza..."
    """
    if not token:
        return token
    
    if len(token) <= visible_chars:
        return token[:2] + '***'
    
    return token[:visible_chars] + '...'


def mask_pii_in_text(text: str) -> str:
    """
    Mask common PII patterns in a text string.
    
    Args:
        text: Text that may contain PII
        
    Returns:
        Text with PII masked
    """
    if not text:
        return text
    
    text = EMAIL_PATTERN.sub('[EMAIL]', text)
    text = PHONE_PATTERN.sub('[PHONE]', text)
    text = CC_PATTERN.sub('[CARD]', text)
    
    return text


def preview_for_log(text: str, max_length: int = 80) -> str:
    """Short, PII-masked preview of user content; redacted in production."""
    if settings.is_production:
        return '[CONTENT_REDACTED]'
    if not text:
        return ''
    
    masked = mask_pii_in_text(text).replace('\n', ' ')
    if len(masked) > max_length:
        return masked[:max_length] + f'... ({len(text)} chars)'
    return masked


def sanitize_for_log(data: dict, max_body_length: int = 100) -> dict:
    """
    Sanitize a request payload for safe logging.
    
    - Redacts API keys and other secrets
    - Truncates and masks user content fields
    
    Args:
        data: Dictionary to sanitize
        max_body_length: Max length for content fields before truncation
        
    Returns:
        Sanitized copy of the dictionary
    """
    if not data:
        return data
    
    sanitized = {}
    
    for key, value in data.items():
        key_lower = key.lower()
        
        if key_lower in SENSITIVE_KEYS:
            sanitized[key] = '[REDACTED]' if value else value
        
        elif key_lower in BODY_KEYS and isinstance(value, str):
            sanitized[key] = preview_for_log(value, max_body_length)
        
        elif isinstance(value, dict):
            sanitized[key] = sanitize_for_log(value, max_body_length)
        
        else:
            sanitized[key] = value
    
    return sanitized


# =============================================================================
# SECURITY EVENTS
# =============================================================================

def log_security_event(event_type: str, details: str, severity: str = "info"):
    """
    Log a security-related event.
    
    Args:
        event_type: Type of security event
        details: Event details (will be sanitized)
        severity: Log level (info, warning, error)
    """
    sanitized_details = mask_pii_in_text(details)
    message = f"[SECURITY] {event_type}: {sanitized_details}"
    
    if severity == "error":
        logger.error(message)
    elif severity == "warning":
        logger.warning(message)
    else:
        logger.info(message)
