# Name: errors.py
# Description: Typed errors raised by the analysis pipeline and mapped to HTTP responses
# Date: 2026-10-12


class CyberSentryError(Exception):
    """Base exception for errors that surface to API clients."""
    
    status_code = 500
    
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
    
    def to_dict(self) -> dict:
        """Error body returned to the client."""
        return {"error": self.message}


class ValidationError(CyberSentryError):
    """A required field is missing or empty."""
    
    status_code = 400


class ConfigError(CyberSentryError):
    """The LLM client is not configured or its key was rejected."""
    
    status_code = 400


class PayloadTooLarge(CyberSentryError):
    """An upload exceeded the configured size cap."""
    
    status_code = 413


class LLMError(CyberSentryError):
    """Any failure invoking the LLM."""
    
    status_code = 500


class NetworkError(LLMError):
    """Transport-level failure (timeout, connection reset) talking to the LLM."""


class InternalError(CyberSentryError):
    """Unexpected failure inside a request, reported without details."""
    
    status_code = 500
    
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
